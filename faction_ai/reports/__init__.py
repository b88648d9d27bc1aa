from .run_report import DecisionReport, build_decision_report

__all__ = ["DecisionReport", "build_decision_report"]
