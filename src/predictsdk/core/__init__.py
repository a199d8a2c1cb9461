from predictsdk.core.sdk import PredictSDK

__all__ = ["PredictSDK"]
