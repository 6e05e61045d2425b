"""
ngdriver: Angular-aware wrapper for Selenium WebDriver.

Waits for Angular to settle before every interaction, locates elements by
Angular constructs (bindings, models, repeaters) and injects mock modules
before application bootstrap.

Basic usage:
    from selenium import webdriver
    from ngdriver import NgBy, NgDriver

    driver = NgDriver(webdriver.Chrome())
    driver.url = "http://localhost:8000/"
    driver.find_element(NgBy.model("yourName")).send_keys("Julie")
    assert driver.find_element(NgBy.binding("yourName")).text == "Hello Julie!"
    driver.quit()

With mock modules and options:
    from ngdriver import NgDriver, NgDriverOptions, NgModule

    options = NgDriverOptions(root_element="#app", script_timeout=20)
    mock = NgModule("noAnimations", "angular.module('noAnimations', [])...")
    with NgDriver(webdriver.Firefox(), mock_modules=[mock], options=options) as driver:
        driver.navigate().go_to_url("http://localhost:8000/")
"""

__version__ = "0.1.0"

from ngdriver.config import ConfigurationError, NgDriverOptions, load_config
from ngdriver.driver import NgDriver
from ngdriver.element import NgElement
from ngdriver.exceptions import (
    AngularNotFoundError,
    ExpressionEvaluationError,
    NgDriverError,
    NoSuchElementError,
    SynchronizationTimeoutError,
    UnsupportedDriverError,
    UnsupportedExecutionContextError,
    UnsupportedOperationError,
)
from ngdriver.locators import NgBy, ScriptBy
from ngdriver.modules import BaseModule, NgModule
from ngdriver.navigation import NgNavigation
from ngdriver.sync import synchronized

__all__ = [
    # Version
    "__version__",
    # Core
    "NgDriver",
    "NgElement",
    "NgNavigation",
    # Locators
    "NgBy",
    "ScriptBy",
    # Modules
    "BaseModule",
    "NgModule",
    # Configuration
    "NgDriverOptions",
    "load_config",
    # Exceptions
    "AngularNotFoundError",
    "ConfigurationError",
    "ExpressionEvaluationError",
    "NgDriverError",
    "NoSuchElementError",
    "SynchronizationTimeoutError",
    "UnsupportedDriverError",
    "UnsupportedExecutionContextError",
    "UnsupportedOperationError",
    # Utilities
    "synchronized",
]
