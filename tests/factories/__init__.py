"""
Test data factories using factory_boy.
"""
from .site_factory import (
    BatteryDetailsFactory,
    GeneratorDetailsFactory,
    GridDetailsFactory,
    SitePayloadFactory,
    SolarDetailsFactory,
    build_site,
)

__all__ = [
    'BatteryDetailsFactory',
    'GeneratorDetailsFactory',
    'GridDetailsFactory',
    'SitePayloadFactory',
    'SolarDetailsFactory',
    'build_site',
]
