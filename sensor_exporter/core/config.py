from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "rpi-sensor-exporter"

    # Polling
    poll_interval_seconds: float = Field(default=5.0, gt=0)

    # Fixed label value attached to every series
    location: str = "indoor"

    # HTTP listener
    host: str = "0.0.0.0"
    port: int = 9101

    # Sensor mode: "sim" for development, "i2c" on the Pi
    sensor_mode: str = "sim"

    enable_bme280: bool = True
    enable_sht2x: bool = True
    enable_tsl2561: bool = True

    # I2C addresses
    bme280_address: int = 0x77
    sht2x_address: int = 0x40
    tsl2561_address: int = 0x29

    # TSL2561 timing: gain 16x when True, integration 0=13.7ms 1=101ms 2=402ms
    tsl2561_gain_16x: bool = True
    tsl2561_integration: int = Field(default=2, ge=0, le=2)

    # Logging
    log_level: str = "INFO"
    log_file: str = "sensor_exporter.log"
    log_max_bytes: int = 2_000_000
    log_backups: int = 5


settings = Settings()
