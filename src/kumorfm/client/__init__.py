"""Client for the hosted prediction service."""

from kumorfm.client.api_client import RFMApiClient, RFMConfig
from kumorfm.client.rfm import KumoRFM, PredictionResult

__all__ = ["KumoRFM", "PredictionResult", "RFMApiClient", "RFMConfig"]
