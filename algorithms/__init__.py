from .calorie_estimator import CalorieEstimator

__all__ = ["CalorieEstimator"]
