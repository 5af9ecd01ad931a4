from teamtasks.core.config import settings


def isDebugMode() -> bool:
    return settings.MODE.lower() == "debug"


def isTestMode() -> bool:
    return settings.MODE.lower() == "test"
