"""
Client-side script catalog for ngdriver.

All scripts run in the page via ``execute_script`` or ``execute_async_script``.
They are sent as text and cannot reference anything outside themselves; the
values they need are read from ``arguments`` by position. Each entry lists
its positional arguments in ``args``. Async scripts receive the completion
callback as their final argument.

The catalog is built once at import and cannot be modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

CATALOG_VERSION = "1.0.0"

# Marker recognised by angular.js bootstrap code: when present in window.name,
# bootstrap pauses until angular.resumeBootstrap() is called.
DEFER_BOOTSTRAP_MARKER = "NG_DEFER_BOOTSTRAP!"


@dataclass(frozen=True)
class ScriptEntry:
    """A named client-side script and its documented arguments."""

    name: str
    source: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.source


# Helper shared by the scripts that need angular.js hooks. Finds
# $$testability or $injector starting from a selector, the root injector
# left by resumeBootstrap, or the usual ng-app/ng-controller markers.
_GET_NG1_HOOKS = r"""
function getNg1Hooks(selector, injectorPlease) {
  function tryEl(el) {
    try {
      if (!injectorPlease && angular.getTestability) {
        var $$testability = angular.getTestability(el);
        if ($$testability) {
          return {$$testability: $$testability};
        }
      } else {
        var $injector = angular.element(el).injector();
        if ($injector) {
          return {$injector: $injector};
        }
      }
    } catch (err) {}
  }
  function trySelector(selector) {
    var els = document.querySelectorAll(selector);
    for (var i = 0; i < els.length; i++) {
      var elHooks = tryEl(els[i]);
      if (elHooks) {
        return elHooks;
      }
    }
  }

  if (selector) {
    return trySelector(selector);
  } else if (window.__TESTABILITY__NG1_APP_ROOT_INJECTOR__) {
    var $injector = window.__TESTABILITY__NG1_APP_ROOT_INJECTOR__;
    var $$testability = null;
    try {
      $$testability = $injector.get('$$testability');
    } catch (e) {}
    return {$injector: $injector, $$testability: $$testability};
  } else {
    return tryEl(document.body) ||
        trySelector('[ng-app]') || trySelector('[ng\\:app]') ||
        trySelector('[ng-controller]') || trySelector('[ng\\:controller]');
  }
}
"""

WAIT_FOR_ANGULAR = ScriptEntry(
    name="wait_for_angular",
    args=("root_selector", "callback"),
    source=_GET_NG1_HOOKS
    + r"""
var rootSelector = arguments[0];
var callback = arguments[1];

try {
  var testCallback = callback;

  var waitForAngular1 = function(callback) {
    if (window.angular) {
      var hooks = getNg1Hooks(rootSelector);
      if (!hooks) {
        callback();
      } else if (hooks.$$testability) {
        hooks.$$testability.whenStable(callback);
      } else if (hooks.$injector) {
        hooks.$injector.get('$browser')
            .notifyWhenNoOutstandingRequests(callback);
      } else if (!rootSelector) {
        throw new Error(
            'Could not automatically find injector on page: ' +
            window.location.toString() + '. Consider setting root_element');
      } else {
        throw new Error(
            'root element (' + rootSelector + ') has no injector.' +
            ' this may mean it is not inside ng-app.');
      }
    } else {
      callback();
    }
  };

  var waitForAngular2 = function() {
    if (window.getAngularTestability) {
      if (rootSelector) {
        var testability = null;
        var el = document.querySelector(rootSelector);
        try {
          testability = window.getAngularTestability(el);
        } catch (e) {}
        if (testability) {
          return testability.whenStable(function() { testCallback(); });
        }
      }

      // Hybrid apps may have more than one root.
      var testabilities = window.getAllAngularTestabilities();
      var count = testabilities.length;
      if (count === 0) {
        return testCallback();
      }
      var decrement = function() {
        count--;
        if (count === 0) {
          testCallback();
        }
      };
      testabilities.forEach(function(testability) {
        testability.whenStable(decrement);
      });
    } else {
      testCallback();
    }
  };

  if (!(window.angular) && !(window.getAngularTestability)) {
    throw new Error(
        'both angularJS testability and angular testability are undefined.' +
        ' This could be either because this is a non-angular page or' +
        ' because your test involves client-side navigation, which can' +
        ' interfere with bootstrapping.');
  } else {
    waitForAngular1(waitForAngular2);
  }
} catch (err) {
  callback(err.message);
}
""",
)

TEST_FOR_ANGULAR = ScriptEntry(
    name="test_for_angular",
    args=("attempts", "interval_ms", "ng12_hybrid", "callback"),
    source=r"""
var attempts = arguments[0];
var interval = arguments[1];
var ng12Hybrid = arguments[2];
var asyncCallback = arguments[3];

var callback = function(args) {
  setTimeout(function() {
    asyncCallback(args);
  }, 0);
};
var definitelyNg1 = !!ng12Hybrid;
var definitelyNg2OrNewer = false;
var check = function(n) {
  try {
    if (!definitelyNg1 && !definitelyNg2OrNewer) {
      if (window.angular && !(window.angular.version && window.angular.version.major > 1)) {
        definitelyNg1 = true;
      } else if (window.getAllAngularTestabilities) {
        definitelyNg2OrNewer = true;
      }
    }
    if (definitelyNg1) {
      if (window.angular && window.angular.resumeBootstrap) {
        return callback({ver: 1});
      }
    } else if (definitelyNg2OrNewer) {
      // Angular 2+ has no resumeBootstrap.
      return callback({ver: 2});
    }
    if (n < 1) {
      if (definitelyNg1 && window.angular) {
        callback({message: 'angular never provided resumeBootstrap'});
      } else if (ng12Hybrid && !window.angular) {
        callback({message: 'angular 1 never loaded' +
            (window.getAllAngularTestabilities ? ' (are you sure this app ' +
            'uses ngUpgrade? Try un-setting ng12_hybrid)' : '')});
      } else {
        callback({message: 'retries looking for angular exceeded'});
      }
    } else {
      window.setTimeout(function() { check(n - 1); }, interval);
    }
  } catch (e) {
    callback({message: String(e)});
  }
};
check(attempts);
""",
)

RESUME_ANGULAR_BOOTSTRAP = ScriptEntry(
    name="resume_angular_bootstrap",
    args=("module_names",),
    source=r"""
window.__TESTABILITY__NG1_APP_ROOT_INJECTOR__ =
    angular.resumeBootstrap(arguments[0].length ? arguments[0].split(',') : []);
""",
)

GET_LOCATION = ScriptEntry(
    name="get_location",
    args=("root_selector",),
    source=_GET_NG1_HOOKS
    + r"""
var hooks = getNg1Hooks(arguments[0]);
if (angular.getTestability) {
  return hooks.$$testability.getLocation();
}
return hooks.$injector.get('$location').absUrl();
""",
)

SET_LOCATION = ScriptEntry(
    name="set_location",
    args=("root_selector", "url"),
    source=_GET_NG1_HOOKS
    + r"""
var hooks = getNg1Hooks(arguments[0]);
var url = arguments[1];
if (angular.getTestability) {
  return hooks.$$testability.setLocation(url);
}
var $injector = hooks.$injector;
var $location = $injector.get('$location');
var $rootScope = $injector.get('$rootScope');

if (url !== $location.url()) {
  $location.url(url);
  $rootScope.$digest();
}
""",
)

EVALUATE = ScriptEntry(
    name="evaluate",
    args=("element", "expression"),
    source=r"""
var element = arguments[0];
var expression = arguments[1];
return angular.element(element).scope().$eval(expression);
""",
)

DEFER_BOOTSTRAP = ScriptEntry(
    name="defer_bootstrap",
    source="window.name += '" + DEFER_BOOTSTRAP_MARKER + "';",
)

DEFER_BOOTSTRAP_AND_NAVIGATE = ScriptEntry(
    name="defer_bootstrap_and_navigate",
    args=("url",),
    source="window.name += '"
    + DEFER_BOOTSTRAP_MARKER
    + "'; window.location.href = arguments[0];",
)

GET_HREF = ScriptEntry(
    name="get_href",
    source="return window.location.href;",
)

DOCUMENT_READY_STATE = ScriptEntry(
    name="document_ready_state",
    source="return document.readyState;",
)

# Locators. Primary arguments come first, followed by the root selector and
# the element that scopes the search (document when absent).

FIND_BINDINGS = ScriptEntry(
    name="find_bindings",
    args=("binding", "exact_match", "root_selector", "using"),
    source=_GET_NG1_HOOKS
    + r"""
var binding = arguments[0];
var exactMatch = arguments[1];
var rootSelector = arguments[2];
var using = arguments[3] || document;

if (angular.getTestability) {
  return getNg1Hooks(rootSelector).$$testability.
      findBindings(using, binding, exactMatch);
}
var bindings = using.getElementsByClassName('ng-binding');
var matches = [];
for (var i = 0; i < bindings.length; ++i) {
  var dataBinding = angular.element(bindings[i]).data('$binding');
  if (dataBinding) {
    var bindingName = dataBinding.exp || dataBinding[0].exp || dataBinding;
    if (exactMatch) {
      var matcher = new RegExp('({|\\s|^|\\|)' +
          binding.replace(/[\-\[\]\/\{\}\(\)\*\+\?\.\\\^\$\|]/g, '\\$&') +
          '(}|\\s|$|\\|)');
      if (matcher.test(bindingName)) {
        matches.push(bindings[i]);
      }
    } else if (bindingName.indexOf(binding) != -1) {
      matches.push(bindings[i]);
    }
  }
}
return matches;
""",
)

FIND_MODEL = ScriptEntry(
    name="find_model",
    args=("model", "root_selector", "using"),
    source=_GET_NG1_HOOKS
    + r"""
var model = arguments[0];
var rootSelector = arguments[1];
var using = arguments[2] || document;

if (angular.getTestability) {
  return getNg1Hooks(rootSelector).$$testability.
      findModels(using, model, true);
}
var prefixes = ['ng-', 'ng_', 'data-ng-', 'x-ng-', 'ng\\:'];
for (var p = 0; p < prefixes.length; ++p) {
  var selector = '[' + prefixes[p] + 'model="' + model + '"]';
  var elements = using.querySelectorAll(selector);
  if (elements.length) {
    return elements;
  }
}
""",
)

FIND_SELECTED_OPTIONS = ScriptEntry(
    name="find_selected_options",
    args=("model", "root_selector", "using"),
    source=r"""
var model = arguments[0];
var using = arguments[2] || document;
var prefixes = ['ng-', 'ng_', 'data-ng-', 'x-ng-', 'ng\\:'];
for (var p = 0; p < prefixes.length; ++p) {
  var selector = 'select[' + prefixes[p] + 'model="' + model + '"] option:checked';
  var inputs = using.querySelectorAll(selector);
  if (inputs.length) {
    return inputs;
  }
}
""",
)

FIND_ALL_REPEATER_ROWS = ScriptEntry(
    name="find_all_repeater_rows",
    args=("repeater", "exact_match", "root_selector", "using"),
    source=r"""
function repeaterMatch(ngRepeat, repeater, exact) {
  if (exact) {
    return ngRepeat.split(' track by ')[0].split(' as ')[0].split('|')[0].
        split('=')[0].trim() == repeater;
  } else {
    return ngRepeat.indexOf(repeater) != -1;
  }
}

var repeater = arguments[0];
var exactMatch = arguments[1];
var using = arguments[3] || document;

var rows = [];
var prefixes = ['ng-', 'ng_', 'data-ng-', 'x-ng-', 'ng\\:'];
for (var p = 0; p < prefixes.length; ++p) {
  var attr = prefixes[p] + 'repeat';
  var repeatElems = using.querySelectorAll('[' + attr + ']');
  attr = attr.replace(/\\/g, '');
  for (var i = 0; i < repeatElems.length; ++i) {
    if (repeaterMatch(repeatElems[i].getAttribute(attr), repeater, exactMatch)) {
      rows.push(repeatElems[i]);
    }
  }
}
for (var p = 0; p < prefixes.length; ++p) {
  var attr = prefixes[p] + 'repeat-start';
  var repeatElems = using.querySelectorAll('[' + attr + ']');
  attr = attr.replace(/\\/g, '');
  for (var i = 0; i < repeatElems.length; ++i) {
    if (repeaterMatch(repeatElems[i].getAttribute(attr), repeater, exactMatch)) {
      var elem = repeatElems[i];
      while (elem.nodeType != 8 ||
          !repeaterMatch(elem.nodeValue, repeater)) {
        if (elem.nodeType == 1) {
          rows.push(elem);
        }
        elem = elem.nextSibling;
      }
    }
  }
}
return rows;
""",
)


CATALOG: Mapping[str, ScriptEntry] = MappingProxyType(
    {
        entry.name: entry
        for entry in (
            WAIT_FOR_ANGULAR,
            TEST_FOR_ANGULAR,
            RESUME_ANGULAR_BOOTSTRAP,
            GET_LOCATION,
            SET_LOCATION,
            EVALUATE,
            DEFER_BOOTSTRAP,
            DEFER_BOOTSTRAP_AND_NAVIGATE,
            GET_HREF,
            DOCUMENT_READY_STATE,
            FIND_BINDINGS,
            FIND_MODEL,
            FIND_SELECTED_OPTIONS,
            FIND_ALL_REPEATER_ROWS,
        )
    }
)


def get_script(name: str) -> ScriptEntry:
    """Look up a catalog entry by name.

    Raises:
        KeyError: If no script with that name exists.
    """
    try:
        return CATALOG[name]
    except KeyError:
        raise KeyError(
            f"Unknown script: {name}. Available scripts: {', '.join(CATALOG)}"
        ) from None


__all__ = [
    "CATALOG",
    "CATALOG_VERSION",
    "DEFER_BOOTSTRAP_MARKER",
    "ScriptEntry",
    "get_script",
    "WAIT_FOR_ANGULAR",
    "TEST_FOR_ANGULAR",
    "RESUME_ANGULAR_BOOTSTRAP",
    "GET_LOCATION",
    "SET_LOCATION",
    "EVALUATE",
    "DEFER_BOOTSTRAP",
    "DEFER_BOOTSTRAP_AND_NAVIGATE",
    "GET_HREF",
    "DOCUMENT_READY_STATE",
    "FIND_BINDINGS",
    "FIND_MODEL",
    "FIND_SELECTED_OPTIONS",
    "FIND_ALL_REPEATER_ROWS",
]
