"""Builder for the list of functions offered to a chat completion."""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

from oaikit.parameters import FunctionParameter


def _names(args: tuple[Any, ...]) -> list[str]:
    """Accept names given one by one or as a single list or tuple."""
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return [str(name) for name in args[0]]
    return [str(name) for name in args]


def _parameters(args: tuple[Any, ...]) -> list[FunctionParameter]:
    """Accept parameters given one by one or as a single iterable."""
    if len(args) == 1 and not isinstance(args[0], FunctionParameter) and isinstance(args[0], Iterable):
        return list(args[0])
    return list(args)


class Functions:
    """Functions, with their descriptions and parameters, in the API's JSON form."""

    def __init__(self, *args: Any) -> None:
        self._functions: dict[str, Any] = {"functions": []}
        if args:
            self.add_functions(*args)

    def _find(self, function_name: str) -> dict[str, Any] | None:
        return next(
            (
                function
                for function in self._functions.get("functions", [])
                if function.get("name") == function_name
            ),
            None,
        )

    def add_function(self, function_name: str) -> bool:
        """Add a function; False if one of that name already exists."""
        if self._find(function_name) is not None:
            return False
        self._functions["functions"].append({"name": function_name})
        return True

    def add_functions(self, *args: Any) -> bool:
        """Add several functions, skipping existing ones; False if none given."""
        names = _names(args)
        if not names:
            return False
        for name in names:
            if self._find(name) is None:
                self._functions["functions"].append({"name": name})
        return True

    def pop_function(self, function_name: str) -> bool:
        """Remove a function entirely; False if it does not exist."""
        function = self._find(function_name)
        if function is None:
            return False
        self._functions["functions"].remove(function)
        return True

    def pop_functions(self, *args: Any) -> bool:
        """Remove several functions, ignoring unknown ones; False if none given."""
        names = _names(args)
        if not names:
            return False
        for name in names:
            function = self._find(name)
            if function is not None:
                self._functions["functions"].remove(function)
        return True

    def set_description(self, target: str, description: str) -> bool:
        """Set a function's description unless it already has one."""
        function = self._find(target)
        if function is None or "description" in function:
            return False
        function["description"] = description
        return True

    def pop_description(self, target: str) -> bool:
        """Remove a function's description."""
        function = self._find(target)
        if function is None or "description" not in function:
            return False
        del function["description"]
        return True

    def set_required(self, target: str, *args: Any) -> bool:
        """Set the required parameter names of a function that has parameters."""
        params = _names(args)
        function = self._find(target)
        if function is None or not params or "parameters" not in function:
            return False
        function["parameters"]["required"] = params
        return True

    def pop_required(self, target: str) -> bool:
        """Remove a function's list of required parameters."""
        function = self._find(target)
        if function is None:
            return False
        parameters = function.get("parameters")
        if parameters is None or "required" not in parameters:
            return False
        del parameters["required"]
        return True

    def append_required(self, target: str, *args: Any) -> bool:
        """Append names to a previously set list of required parameters."""
        params = _names(args)
        function = self._find(target)
        if function is None or not params:
            return False
        parameters = function.get("parameters")
        if parameters is None or "required" not in parameters:
            return False
        parameters["required"].extend(params)
        return True

    @staticmethod
    def _add_property(parameters: dict[str, Any], parameter: FunctionParameter) -> bool:
        properties = parameters.setdefault("properties", {})
        if parameter.name in properties:
            return False
        properties[parameter.name] = parameter.to_schema()
        return True

    def set_parameter(self, target: str, parameter: FunctionParameter) -> bool:
        """Give a function its first parameter; False if it already has parameters."""
        return self.set_parameters(target, parameter)

    def set_parameters(self, target: str, *args: Any) -> bool:
        """Give a function its parameters; False if it already has some."""
        parameters = _parameters(args)
        function = self._find(target)
        if function is None or "parameters" in function or not parameters:
            return False
        block: dict[str, Any] = {"properties": {}, "type": "object"}
        for parameter in parameters:
            self._add_property(block, parameter)
        function["parameters"] = block
        return True

    def pop_parameters(self, target: str, *args: Any) -> bool:
        """Remove named parameters, or the whole parameters block if none are named."""
        function = self._find(target)
        if function is None or "parameters" not in function:
            return False
        names = _names(args)
        if not args:
            del function["parameters"]
            return True
        properties = function["parameters"].get("properties", {})
        for name in names:
            properties.pop(name, None)
        return True

    def append_parameter(self, target: str, parameter: FunctionParameter) -> bool:
        """Add one parameter to a function that already has parameters."""
        function = self._find(target)
        if function is None or "parameters" not in function:
            return False
        return self._add_property(function["parameters"], parameter)

    def append_parameters(self, target: str, *args: Any) -> bool:
        """Add parameters, skipping names already present, to a function with parameters."""
        function = self._find(target)
        if function is None or "parameters" not in function:
            return False
        for parameter in _parameters(args):
            self._add_property(function["parameters"], parameter)
        return True

    def to_json(self) -> dict[str, Any]:
        """Return a copy of the functions document."""
        return copy.deepcopy(self._functions)