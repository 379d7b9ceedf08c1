from pydantic import BaseModel, ValidationError, field_validator

DEFAULT_MOCK_DATA_COUNT = 30
MOCK_DATA_COUNT_MIN = 10
MOCK_DATA_COUNT_MAX = 100
MOCK_DATA_COUNT_STEP = 10


def _check_mock_count(value: int) -> int:
    if not MOCK_DATA_COUNT_MIN <= value <= MOCK_DATA_COUNT_MAX:
        raise ValueError(
            f"mock_data_count must be between {MOCK_DATA_COUNT_MIN} and {MOCK_DATA_COUNT_MAX}"
        )
    if value % MOCK_DATA_COUNT_STEP:
        raise ValueError(f"mock_data_count must be a multiple of {MOCK_DATA_COUNT_STEP}")
    return value


class DebugSettings(BaseModel):
    """Data visibility and sample data configuration."""

    use_mock_data: bool = False
    mock_data_count: int = DEFAULT_MOCK_DATA_COUNT
    show_all_data: bool = False

    @field_validator("mock_data_count")
    @classmethod
    def _valid_count(cls, value: int) -> int:
        return _check_mock_count(value)

    @classmethod
    def from_raw(
        cls, use_mock_data: bool, mock_data_count: int, show_all_data: bool
    ) -> "DebugSettings":
        """Build settings from stored values, treating an unset count as the default."""
        if mock_data_count == 0:
            mock_data_count = DEFAULT_MOCK_DATA_COUNT
        return cls(
            use_mock_data=use_mock_data,
            mock_data_count=mock_data_count,
            show_all_data=show_all_data,
        )

    def reset(self) -> "DebugSettings":
        return DebugSettings()


class SettingsSchema(BaseModel):
    use_mock_data: bool = False
    mock_data_count: int = DEFAULT_MOCK_DATA_COUNT
    show_all_data: bool = False
    weeks_to_show: int = 26
    app_version: str = "1.0.0"

    @field_validator("mock_data_count", mode="before")
    @classmethod
    def _valid_count(cls, value) -> int:
        value = int(float(value))
        if value == 0:
            return DEFAULT_MOCK_DATA_COUNT
        return _check_mock_count(value)

    @field_validator("weeks_to_show", mode="before")
    @classmethod
    def _valid_weeks(cls, value) -> int:
        value = int(float(value))
        if value < 1:
            raise ValueError("weeks_to_show must be positive")
        return value


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
