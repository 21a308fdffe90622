"""Shared field validators. Messages are shown to users verbatim."""

import math

from pydantic_core import PydanticCustomError

LOCATION_NAME_REQUIRED = "場所名は必須です"
LATITUDE_OUT_OF_RANGE = "緯度は-90から90の間で入力してください"
LONGITUDE_OUT_OF_RANGE = "経度は-180から180の間で入力してください"
FILE_PATH_REQUIRED = "ファイルパスは必須です"
USERNAME_REQUIRED = "ユーザー名は必須です"


def require_non_empty(value: str, error_type: str, message: str) -> str:
    if not value:
        raise PydanticCustomError(error_type, message)
    return value


def check_latitude(value: float) -> float:
    # NaN fails every comparison, so test finiteness first
    if not math.isfinite(value) or value < -90 or value > 90:
        raise PydanticCustomError("latitude_range", LATITUDE_OUT_OF_RANGE)
    return value


def check_longitude(value: float) -> float:
    if not math.isfinite(value) or value < -180 or value > 180:
        raise PydanticCustomError("longitude_range", LONGITUDE_OUT_OF_RANGE)
    return value
