# modules/scoring/interface.py


class ScoringInterface:
    """
    Cổng giao tiếp duy nhất của module Scoring cho các module khác.
    """

    @staticmethod
    def score(questions, answers):
        """Return the ScoreSummary of a finished attempt."""
        from .logics.calculator import ScoreCalculator
        return ScoreCalculator.score(questions, answers)

    @staticmethod
    def build_results(questions, answers) -> dict:
        """Score plus per-question review, ready for the results view."""
        from .logics.calculator import ScoreCalculator
        summary = ScoreCalculator.score(questions, answers)
        review = ScoreCalculator.review(questions, answers)
        return {
            'summary': summary.to_dict(),
            'review': [entry.to_dict() for entry in review],
        }
