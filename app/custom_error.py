from fastapi import HTTPException, status


class DatabaseError(HTTPException):
    def __init__(self, error_detail_message: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail_message)


class ServerError(HTTPException):
    def __init__(self, error_detail_message: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail_message)


class ConfigurationError(HTTPException):
    """Raised when a required setting (secret, url, key) is missing at call time"""

    def __init__(self, setting_name: str):
        self.setting_name = setting_name
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Missing required configuration: {setting_name}")
