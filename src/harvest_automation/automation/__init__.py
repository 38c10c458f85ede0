"""Harvest task management on the automation network."""

from harvest_automation.automation.client import AutomationTaskClient
from harvest_automation.automation.models import CancelTaskResult
from harvest_automation.automation.sdk import OpsSDK

__all__ = ["AutomationTaskClient", "CancelTaskResult", "OpsSDK"]
