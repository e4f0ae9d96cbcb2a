from rolestrategy.core.config import ClientConfig
from rolestrategy.core.errors import ResponseDecodeError, RoleStrategyError, RoleStrategyHTTPError
from rolestrategy.core.types import RoleType

__all__ = ["ClientConfig", "ResponseDecodeError", "RoleStrategyError", "RoleStrategyHTTPError", "RoleType"]
