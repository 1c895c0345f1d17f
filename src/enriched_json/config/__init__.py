from .loader import default_config_data, load_config
from .models import ReportConfig, SerializationLimits

__all__ = ["ReportConfig", "SerializationLimits", "default_config_data", "load_config"]
