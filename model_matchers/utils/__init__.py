from model_matchers.utils.logger import logger
from model_matchers.utils.probes import Probe, preserved_state, probe_value

__all__ = [
    "logger",
    "Probe",
    "preserved_state",
    "probe_value",
]
