"""
Parking Normalizer - Configuration Management
Reads settings from the environment (python-dotenv for local development)
or from AWS SSM Parameter Store when running in production.
"""

import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class Config:
    """
    Configuration manager with dual-mode operation:
    - Local: Reads from .env file via python-dotenv
    - Production: Reads from AWS SSM Parameter Store
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from SSM (production) or environment (local).

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch a parameter from AWS SSM Parameter Store.

        Raises:
            ConfigurationError: If the parameter is missing and no default was
                                given, or if the SSM call fails without a default
        """
        ssm_prefix = os.getenv('AWS_SSM_PREFIX', '/parking-normalizer')
        parameter_name = f"{ssm_prefix}/{key}"

        try:
            if self._ssm_client is None:
                import boto3
                self._ssm_client = boto3.client(
                    'ssm',
                    region_name=os.getenv('AWS_REGION', 'us-east-1')
                )

            response = self._ssm_client.get_parameter(
                Name=parameter_name,
                WithDecryption=True
            )
            return response['Parameter']['Value']

        except Exception as e:
            error_type = type(e).__name__
            if error_type == 'ParameterNotFound':
                if default is not None:
                    return default
                raise ConfigurationError(
                    f"Required parameter '{key}' not found in SSM at path '{parameter_name}'."
                ) from e

            if default is not None:
                logging.warning(
                    f"Failed to fetch SSM parameter '{key}': {error_type}: {e}. "
                    f"Using default value."
                )
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}."
            ) from e

    def get_int(self, key: str, default: int) -> int:
        """
        Get configuration value as integer.

        Falls back to the default (with a warning) when the stored value
        is not a valid integer.
        """
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            logging.warning(
                f"Invalid integer for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


# Global configuration instance
config = Config()


# Database configuration
DB_HOST = config.get('DB_HOST', 'localhost')
DB_PORT = config.get_int('DB_PORT', 3306)
DB_NAME = config.get('DB_NAME', 'parking_dev')
DB_USER = config.get('DB_USER', 'root')
DB_PASSWORD = config.get('DB_PASSWORD', '')

# Full SQLAlchemy URL, overrides the DB_* settings when present
DATABASE_URL = config.get('DATABASE_URL')

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Civil timezone all bucket arithmetic is done in
CIVIL_TIMEZONE = config.get('CIVIL_TIMEZONE', 'America/New_York')

# Normalization policy
MIN_SAMPLES_PER_HOUR = config.get_int('MIN_SAMPLES_PER_HOUR', 5)
RECENT_BACKTRACK_HOURS = config.get_int('RECENT_BACKTRACK_HOURS', 3)

# Database connection pool settings
DB_POOL_SIZE = 5
DB_POOL_MAX_OVERFLOW = 10
DB_POOL_RECYCLE = 3600  # Recycle connections after 1 hour
DB_POOL_PRE_PING = True
