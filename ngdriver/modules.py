"""
Mock modules for ngdriver.

A mock module is a script fragment that registers an angular.js module in the
page. Modules are injected while bootstrap is deferred, and their names are
handed to ``angular.resumeBootstrap()`` so the application loads them. The
usual purpose is to replace real services with test doubles.

Example:
    http_backend = NgModule(
        "httpBackendMock",
        "angular.module('httpBackendMock', ['ngMockE2E'])"
        ".run(function($httpBackend) { $httpBackend.whenGET(/.*/).passThrough(); });",
    )
    driver = NgDriver(webdriver.Chrome(), mock_modules=[http_backend])
"""

from __future__ import annotations

from dataclasses import dataclass

BASE_MODULE_NAME = "ngdriverBaseModule_"


@dataclass(frozen=True)
class NgModule:
    """A named script fragment injected before Angular bootstraps.

    The script may run again on every navigation, so it must be safe to
    execute more than once.
    """

    name: str
    script: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Module name must be a non-empty string")
        if not isinstance(self.script, str) or not self.script:
            raise ValueError(f"Module '{self.name}' must have a non-empty script")


_BASE_MODULE_TEMPLATE = """
var trackOutstandingTimeouts = %(track)s;
var ngMod = angular.module('%(name)s', []).config([
  '$compileProvider',
  function($compileProvider) {
    if ($compileProvider.debugInfoEnabled) {
      $compileProvider.debugInfoEnabled(true);
    }
  }
]);
if (trackOutstandingTimeouts) {
  ngMod.config([
    '$provide',
    function($provide) {
      $provide.decorator('$timeout', [
        '$delegate',
        function($delegate) {
          var $timeout = $delegate;
          var taskId = 0;

          if (!window['NG_PENDING_TIMEOUTS']) {
            window['NG_PENDING_TIMEOUTS'] = {};
          }

          var extendedTimeout = function() {
            var args = Array.prototype.slice.call(arguments);
            if (typeof(args[0]) !== 'function') {
              return $timeout.apply(null, args);
            }

            taskId++;
            var fn = args[0];
            window['NG_PENDING_TIMEOUTS'][taskId] = fn.toString();
            var wrappedFn = (function(taskId_) {
              return function() {
                delete window['NG_PENDING_TIMEOUTS'][taskId_];
                return fn.apply(null, arguments);
              };
            })(taskId);
            args[0] = wrappedFn;

            var promise = $timeout.apply(null, args);
            promise.ptorTaskId_ = taskId;
            return promise;
          };

          extendedTimeout.cancel = function() {
            var taskId_ = arguments[0] && arguments[0].ptorTaskId_;
            if (taskId_) {
              delete window['NG_PENDING_TIMEOUTS'][taskId_];
            }
            return $timeout.cancel.apply($timeout, arguments);
          };

          return extendedTimeout;
        }
      ]);
    }
  ]);
}
"""


class BaseModule(NgModule):
    """Module installed automatically when an angular.js page is loaded.

    Enables compile debug info (needed by the binding locators) and, unless
    disabled, records pending ``$timeout`` tasks in
    ``window.NG_PENDING_TIMEOUTS``.
    """

    def __init__(self, track_outstanding_timeouts: bool = True) -> None:
        script = _BASE_MODULE_TEMPLATE % {
            "name": BASE_MODULE_NAME,
            "track": "true" if track_outstanding_timeouts else "false",
        }
        super().__init__(BASE_MODULE_NAME, script)


__all__ = [
    "BASE_MODULE_NAME",
    "BaseModule",
    "NgModule",
]
