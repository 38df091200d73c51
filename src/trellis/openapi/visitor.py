"""AST walk over a handler body.

Collects raw facts in one traversal: accessor calls, the body type,
response builders, JSON object keys, and scalar conversions applied to
accessor results.  Conversions are recorded as deferred refinements and
folded into the parameter list by name once the walk is done, since a
conversion can wrap an accessor that has not been visited yet.
"""

import ast

from trellis.openapi.types import ParamLocation, ParamMeta

# accessor function -> (location, required)
ACCESSORS: dict[str, tuple[ParamLocation, bool]] = {
    "get_param": (ParamLocation.PATH, False),
    "get_param_required": (ParamLocation.PATH, True),
    "get_query_param": (ParamLocation.QUERY, False),
    "get_query_param_required": (ParamLocation.QUERY, True),
}

BODY_EXTRACTOR = "get_body"

# response builder -> content type
RESPONSE_BUILDERS: dict[str, str] = {
    "json": "application/json",
    "text": "text/plain",
    "html": "text/html",
    "no_content": "none",
    "redirect": "none",
    "raw": "application/octet-stream",
}

# content type when no builder is recognized
DEFAULT_CONTENT_TYPE = "application/json"

# conversion callable -> (schema type, schema format)
CONVERSIONS: dict[str, tuple[str, str | None]] = {
    "int": ("integer", "int64"),
    "float": ("number", "double"),
    "bool": ("boolean", None),
    "str": ("string", None),
    "Decimal": ("string", "decimal"),
    "UUID": ("string", "uuid"),
}


def call_name(func: ast.expr) -> str | None:
    """``foo`` for ``foo(...)`` and ``mod.foo(...)``."""
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def type_name(node: ast.expr | None) -> str | None:
    """Reduce a type expression to its base name.

    ``pkg.User`` -> ``User``, ``list[User]`` -> ``list``,
    ``User | None`` -> ``User``, ``"User"`` -> ``User``.
    """
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Subscript):
        return type_name(node.value)
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return type_name(node.left)
    if isinstance(node, ast.Constant) and isinstance(node.value, str) and node.value:
        return node.value.rsplit(".", 1)[-1]
    return None


def field_name(call: ast.Call) -> str | None:
    """The string-literal field name of an accessor call, if it has one."""
    if len(call.args) >= 2:
        arg = call.args[1]
    else:
        arg = next((kw.value for kw in call.keywords if kw.arg == "name"), None)
    if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
        return arg.value
    return None


def find_param(node: ast.expr) -> str | None:
    """Walk back from *node* to the accessor call that produced it."""
    if isinstance(node, ast.Call):
        if call_name(node.func) in ACCESSORS:
            return field_name(node)
        if isinstance(node.func, ast.Attribute):
            # get_param(event, "id").strip()
            if (name := find_param(node.func.value)) is not None:
                return name
        # str(get_param(event, "id"))
        for arg in node.args:
            if (name := find_param(arg)) is not None:
                return name
        return None
    if isinstance(node, ast.Await):
        return find_param(node.value)
    if isinstance(node, ast.BoolOp):
        for value in node.values:
            if (name := find_param(value)) is not None:
                return name
        return None
    if isinstance(node, ast.IfExp):
        return find_param(node.body) or find_param(node.orelse)
    if isinstance(node, ast.Lambda):
        return find_param(node.body)
    if isinstance(node, ast.NamedExpr):
        return find_param(node.value)
    return None


def is_body_call(node: ast.expr | None) -> bool:
    """True for ``get_body(...)`` and ``await get_body(...)``."""
    if isinstance(node, ast.Await):
        return is_body_call(node.value)
    return isinstance(node, ast.Call) and call_name(node.func) == BODY_EXTRACTOR


def dict_keys(node: ast.expr) -> list[str] | None:
    """Top-level string keys of a dict display or ``dict(k=...)`` call."""
    if isinstance(node, ast.Dict):
        return [
            k.value
            for k in node.keys
            if isinstance(k, ast.Constant) and isinstance(k.value, str)
        ]
    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == "dict":
        return [kw.arg for kw in node.keywords if kw.arg is not None]
    return None


class HandlerVisitor(ast.NodeVisitor):
    """Collects metadata facts from the statements of a handler."""

    def __init__(self) -> None:
        self.params: list[ParamMeta] = []
        self.body_type: str | None = None
        self.builders: list[str] = []
        self.response_fields: list[str] | None = None
        self._dict_locals: dict[str, list[str]] = {}
        self._refinements: list[tuple[str, str, str | None]] = []

    @property
    def response_content_type(self) -> str:
        """Content type of the first builder seen, else ``application/json``."""
        if self.builders:
            return RESPONSE_BUILDERS[self.builders[0]]
        return DEFAULT_CONTENT_TYPE

    def visit_Call(self, node: ast.Call) -> None:
        name = call_name(node.func)
        if name in ACCESSORS:
            self._record_param(node, *ACCESSORS[name])
        elif name == BODY_EXTRACTOR:
            model = node.args[1] if len(node.args) >= 2 else None
            if model is None:
                model = next((kw.value for kw in node.keywords if kw.arg == "model"), None)
            if (found := type_name(model)) is not None:
                self.body_type = found
        elif name in RESPONSE_BUILDERS:
            self.builders.append(name)
            if name == "json" and self.response_fields is None and node.args:
                self.response_fields = self._object_keys(node.args[0])
        elif name in CONVERSIONS and node.args:
            param = find_param(node.args[0])
            if param is not None:
                self._refinements.append((param, *CONVERSIONS[name]))

        self.generic_visit(node)

    def visit_Assign(self, node: ast.Assign) -> None:
        keys = dict_keys(node.value)
        if keys is not None:
            for target in node.targets:
                if isinstance(target, ast.Name):
                    self._dict_locals[target.id] = keys
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if is_body_call(node.value) and (found := type_name(node.annotation)) is not None:
            self.body_type = found
        if node.value is not None and isinstance(node.target, ast.Name):
            keys = dict_keys(node.value)
            if keys is not None:
                self._dict_locals[node.target.id] = keys
        self.generic_visit(node)

    def apply_refinements(self) -> None:
        """Fold recorded conversions into the parameters they apply to.

        The first conversion recorded for a parameter wins, so the outermost
        of nested conversions decides its type.
        """
        refined: set[str] = set()
        for name, schema_type, schema_format in self._refinements:
            if name in refined:
                continue
            refined.add(name)
            for param in self.params:
                if param.name == name:
                    param.schema_type = schema_type
                    param.schema_format = schema_format
                    break
        self._refinements.clear()

    def _record_param(self, node: ast.Call, location: ParamLocation, required: bool) -> None:
        name = field_name(node)
        if name is None:
            return
        for existing in self.params:
            if existing.name == name and existing.location is location:
                existing.required = existing.required or required
                return
        self.params.append(ParamMeta(name=name, location=location, required=required))

    def _object_keys(self, node: ast.expr) -> list[str] | None:
        if isinstance(node, ast.Name):
            return self._dict_locals.get(node.id)
        return dict_keys(node)
