from __future__ import annotations
import asyncio
import inspect
import json
import logging
import re
import sys
from typing import Any, Callable, TextIO, get_type_hints
from pydantic import BaseModel, ValidationError, create_model

Json = dict[str, Any]

logger = logging.getLogger(__name__)

LATEST_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")

# JSON-RPC / MCP error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002
NOT_INITIALIZED = -32002


class McpError(Exception):
    """Error raised by a handler, returned to the client as a JSON-RPC error."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def invalid_params(cls, message: str, data: Any = None) -> 'McpError':
        return cls(INVALID_PARAMS, message, data)

    @classmethod
    def resource_not_found(cls, message: str, data: Any = None) -> 'McpError':
        return cls(RESOURCE_NOT_FOUND, message, data)

    def to_json(self) -> Json:
        err: Json = {"code": self.code, "message": self.message}
        if self.data is not None:
            err["data"] = self.data
        return err


def _build_param_model(fn: Callable) -> type[BaseModel] | None:
    sig = inspect.signature(fn)
    hints = get_type_hints(fn, include_extras=True)
    fields = {}
    for name, p in sig.parameters.items():
        if name == "self":
            continue
        ann = hints.get(name, Any)
        fields[name] = (ann, ...) if p.default is inspect.Parameter.empty else (
            ann, p.default)
    # type: ignore
    return create_model(f"{fn.__name__}Params", **fields) if fields else None


def _build_result_model(fn: Callable) -> type[BaseModel] | None:
    hints = get_type_hints(fn)
    if "return" not in hints:
        return None
    # type: ignore
    return create_model(f"{fn.__name__}Result", result=(hints["return"], ...))


def _doc_summary(fn: Callable) -> str | None:
    doc = inspect.getdoc(fn) or ""
    return doc.strip().splitlines()[0] if doc else None


class _Tool:
    def __init__(self, name: str, fn: Callable):
        self.name = name
        self.fn = fn
        self.params_model = _build_param_model(fn)
        self.result_model = _build_result_model(fn)
        self.description = _doc_summary(fn)

    def input_schema(self):
        if self.params_model:
            return self.params_model.model_json_schema()
        return {"type": "object", "properties": {}}


class _Resource:
    def __init__(self, uri: str, name: str, description: str, mimeType: str, fn: Callable):
        self.uri = uri
        self.name = name
        self.description = description
        self.mimeType = mimeType
        self.fn = fn
        self.uri_params = re.findall(r'\{(\w+)\}', uri)
        self._pattern = self._compile(uri)

    @property
    def is_template(self) -> bool:
        return bool(self.uri_params)

    @staticmethod
    def _compile(uri: str) -> re.Pattern:
        # Convert URI template to regex pattern
        pattern = re.escape(uri).replace(r'\{', '{').replace(r'\}', '}')
        pattern = re.sub(r'\{(\w+)\}', r'(?P<\1>[^/]+)', pattern)
        return re.compile(f'^{pattern}$')

    def matches_uri(self, uri: str) -> dict[str, str] | None:
        '''Check if URI matches this resource template and extract params.'''
        match = self._pattern.match(uri)
        return match.groupdict() if match else None


class _Prompt:
    def __init__(self, name: str, description: str, arguments: list, fn: Callable):
        self.name = name
        self.description = description
        self.arguments = arguments
        self.fn = fn


class McpMeta(type):
    def __new__(mcls, name, bases, ns, **kw):
        cls = super().__new__(mcls, name, bases, ns, **kw)
        tools: dict[str, _Tool] = {}
        resources: dict[str, _Resource] = {}
        prompts: dict[str, _Prompt] = {}

        scheme = getattr(cls, "resource_scheme", "res")
        mime_overrides = getattr(cls, "resource_mime_types", {})
        title_overrides = getattr(cls, "resource_titles", {})

        for attr, val in ns.items():
            if not inspect.isfunction(val) or attr.startswith("_"):
                continue

            # Convention: resource_* methods become resources
            if attr.startswith("resource_"):
                resource_name = attr[9:]  # Strip 'resource_' prefix

                sig = inspect.signature(val)
                params = [p for p in sig.parameters.keys() if p != 'self']

                if params:
                    # Parameterized resource: scheme://name/{param}
                    uri = f"{scheme}://{resource_name}/{{{params[0]}}}"
                else:
                    uri = f"{scheme}://{resource_name}"

                if resource_name in mime_overrides:
                    mimeType = mime_overrides[resource_name]
                else:
                    # Infer mimeType from return type hint
                    hints = get_type_hints(val)
                    return_type = hints.get('return', str)
                    mimeType = "application/json" if return_type == dict else "text/plain"

                resources[uri] = _Resource(
                    uri=uri,
                    name=title_overrides.get(resource_name, resource_name.replace('_', ' ').title()),
                    description=_doc_summary(val) or "",
                    mimeType=mimeType,
                    fn=val
                )

            # Convention: prompt_* methods become prompts
            elif attr.startswith("prompt_"):
                prompt_name = attr[7:]  # Strip 'prompt_' prefix

                sig = inspect.signature(val)
                arguments = []
                for param_name, param in sig.parameters.items():
                    if param_name == 'self':
                        continue
                    arguments.append({
                        "name": param_name,
                        "description": f"{param_name.replace('_', ' ')} parameter",
                        "required": param.default is inspect.Parameter.empty
                    })

                prompts[prompt_name] = _Prompt(
                    name=prompt_name,
                    description=_doc_summary(val) or "",
                    arguments=arguments,
                    fn=val
                )

            # Default: plain method is a tool
            else:
                tools[attr] = _Tool(attr, val)

        setattr(cls, "__mcp_tools__", tools)
        setattr(cls, "__mcp_resources__", resources)
        setattr(cls, "__mcp_prompts__", prompts)
        return cls


def _result(req_id: Any, result: Json) -> Json:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def _error(req_id: Any, code: int, message: str, data: Any = None) -> Json:
    return {"jsonrpc": "2.0", "id": req_id,
            "error": McpError(code, message, data).to_json()}


class McpServer(metaclass=McpMeta):
    resource_scheme: str = "res"
    resource_mime_types: dict[str, str] = {}
    resource_titles: dict[str, str] = {}
    server_name: str | None = None
    server_version: str = "0.1.0"
    instructions: str | None = None

    def __init__(self, protocol_version: str = LATEST_PROTOCOL_VERSION):
        self._initialized = False
        self._protocol_version = protocol_version

    def _server_info(self) -> Json:
        return {
            "name": self.server_name or self.__class__.__name__,
            "version": self.server_version
        }

    def _capabilities(self) -> Json:
        caps = {}

        if self.__mcp_tools__:
            caps["tools"] = {"listChanged": False}

        if self.__mcp_resources__:
            caps["resources"] = {"subscribe": False, "listChanged": False}

        if self.__mcp_prompts__:
            caps["prompts"] = {"listChanged": False}

        return caps

    def _negotiate_version(self, client_version: str | None) -> str:
        if client_version in SUPPORTED_PROTOCOL_VERSIONS:
            return client_version
        return self._protocol_version

    def _tools_list(self) -> list[Json]:
        return [{
            "name": name,
            "description": t.description,
            "inputSchema": t.input_schema(),
        } for name, t in self.__mcp_tools__.items()]

    def _resources_list(self) -> list[Json]:
        return [{
            "uri": r.uri,
            "name": r.name,
            "description": r.description,
            "mimeType": r.mimeType
        } for r in self.__mcp_resources__.values() if not r.is_template]

    def _resource_templates_list(self) -> list[Json]:
        return [{
            "uriTemplate": r.uri,
            "name": r.name,
            "description": r.description,
            "mimeType": r.mimeType
        } for r in self.__mcp_resources__.values() if r.is_template]

    def _prompts_list(self) -> list[Json]:
        return [{
            "name": p.name,
            "description": p.description,
            "arguments": p.arguments
        } for p in self.__mcp_prompts__.values()]

    async def _call(self, fn_name: str, **kwargs) -> Any:
        res = getattr(self, fn_name)(**kwargs)
        if inspect.isawaitable(res):
            res = await res
        return res

    async def _handle_line(self, line: str) -> Json | None:
        try:
            req = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Unparsable message: %s", e)
            return _error(None, PARSE_ERROR, f"Parse error: {e}")
        if not isinstance(req, dict):
            return _error(None, INVALID_REQUEST, "Invalid JSON-RPC")
        return await self._handle_request(req)

    async def _handle_request(self, req: Json) -> Json | None:
        if req.get("jsonrpc") != "2.0":
            return _error(req.get("id"), INVALID_REQUEST, "Invalid JSON-RPC")

        method = req.get("method")
        req_id = req.get("id")
        logger.debug("Handling %s (id=%s)", method, req_id)

        params = req.get("params") or {}
        if not isinstance(params, dict):
            if req_id is None:
                return None
            return _error(req_id, INVALID_PARAMS, "params must be an object")

        # MCP LIFECYCLE: initialize
        if method == "initialize":
            version = self._negotiate_version(params.get("protocolVersion"))
            result = {
                "protocolVersion": version,
                "capabilities": self._capabilities(),
                "serverInfo": self._server_info()
            }
            if self.instructions:
                result["instructions"] = self.instructions
            return _result(req_id, result)

        # MCP LIFECYCLE: initialized notification
        if method == "notifications/initialized":
            self._initialized = True
            return None  # Notifications don't get responses

        if method == "ping":
            return _result(req_id, {})

        if req_id is None:
            # Other notifications are accepted and ignored
            return None

        # ENFORCE INITIALIZATION
        if not self._initialized:
            return _error(req_id, NOT_INITIALIZED, "Server not initialized")

        if method == "tools/list":
            return _result(req_id, {"tools": self._tools_list()})

        # RESOURCES
        if method == "resources/list":
            return _result(req_id, {"resources": self._resources_list()})

        if method == "resources/templates/list":
            return _result(req_id, {"resourceTemplates": self._resource_templates_list()})

        if method == "resources/read":
            return await self._read_resource(req_id, params.get("uri"))

        # PROMPTS
        if method == "prompts/list":
            return _result(req_id, {"prompts": self._prompts_list()})

        if method in ("prompts/get", "tools/call"):
            args = params.get("arguments") or {}
            if not isinstance(args, dict):
                return _error(req_id, INVALID_PARAMS, "arguments must be an object")
            if method == "prompts/get":
                return await self._get_prompt(req_id, params.get("name"), args)
            return await self._call_tool(req_id, params.get("name"), args)

        return _error(req_id, METHOD_NOT_FOUND, f"Unknown method: {method}")

    def _unknown_resource(self, uri: str) -> McpError:
        return McpError.resource_not_found(f"Unknown resource: {uri}", {"uri": uri})

    async def _read_resource(self, req_id: Any, uri: Any) -> Json:
        if not uri or not isinstance(uri, str):
            return _error(req_id, INVALID_PARAMS, "Missing uri parameter")

        for resource in self.__mcp_resources__.values():
            params = resource.matches_uri(uri)
            if params is None:
                continue
            try:
                content = await self._call(resource.fn.__name__, **params)
            except McpError as e:
                return {"jsonrpc": "2.0", "id": req_id, "error": e.to_json()}
            except Exception as e:
                logger.exception("Resource %s failed", uri)
                return _error(req_id, INTERNAL_ERROR, str(e))

            text = json.dumps(content) if isinstance(content, dict) else str(content)
            return _result(req_id, {
                "contents": [{
                    "uri": uri,
                    "mimeType": resource.mimeType,
                    "text": text
                }]
            })

        return {"jsonrpc": "2.0", "id": req_id, "error": self._unknown_resource(uri).to_json()}

    async def _get_prompt(self, req_id: Any, name: str | None, args: Json) -> Json:
        prompt = self.__mcp_prompts__.get(name)
        if not prompt:
            return _error(req_id, INVALID_PARAMS, f"Unknown prompt: {name}")

        fn = getattr(self, prompt.fn.__name__)
        try:
            inspect.signature(fn).bind(**args)
        except TypeError as e:
            return _error(req_id, INVALID_PARAMS, str(e))

        try:
            result = await self._call(prompt.fn.__name__, **args)
        except McpError as e:
            return {"jsonrpc": "2.0", "id": req_id, "error": e.to_json()}
        except Exception as e:
            logger.exception("Prompt %s failed", name)
            return _error(req_id, INTERNAL_ERROR, str(e))
        return _result(req_id, result)

    async def _call_tool(self, req_id: Any, name: str | None, args: Json) -> Json:
        tool = self.__mcp_tools__.get(name)
        if not tool:
            return _error(req_id, METHOD_NOT_FOUND, f"Unknown tool: {name}")

        try:
            parsed = dict(tool.params_model(**args)) if tool.params_model else {}
        except ValidationError as e:
            return _error(req_id, INVALID_PARAMS, f"Invalid arguments for {name}",
                          json.loads(e.json(include_url=False)))

        try:
            res = await self._call(tool.name, **parsed)
        except McpError as e:
            return {"jsonrpc": "2.0", "id": req_id, "error": e.to_json()}
        except Exception as e:
            # Tool failures are reported in-band
            logger.exception("Tool %s failed", name)
            return _result(req_id, {
                "content": [{"type": "text", "text": str(e)}],
                "isError": True
            })

        if isinstance(res, str):
            text_content = res
        elif tool.result_model:
            result_json = tool.result_model(result=res).model_dump(mode="json")
            text_content = json.dumps(result_json['result'])
        else:
            text_content = json.dumps(res)

        return _result(req_id, {
            "content": [{"type": "text", "text": text_content}]
        })


async def serve_stdio(server: McpServer, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    """Serve newline-delimited JSON-RPC messages until stdin closes."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    loop = asyncio.get_running_loop()

    while True:
        line = await loop.run_in_executor(None, stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue

        try:
            resp = await server._handle_line(line)
        except Exception as e:
            # One bad message must not stop the server
            logger.exception("Unhandled error while processing a message")
            resp = _error(None, INTERNAL_ERROR, f"Internal error: {e}")
        # Only write if there's a response (notifications return None)
        if resp is not None:
            stdout.write(json.dumps(resp) + "\n")
            stdout.flush()

    logger.info("stdin closed, shutting down")
