import json
from dataclasses import dataclass, field
from typing import Any, List, Tuple

import yaml

METHOD_GET = 'get'
METHOD_POST = 'post'
METHODS = (METHOD_GET, METHOD_POST)

MIN_URL_LENGTH = 5


def stringify(value: Any) -> str:
    """Canonical string form of a JSON value, used on both sides of a field comparison"""
    if isinstance(value, str):
        return value
    # deliberately the JSON spelling "null", not a "<nil>"-style placeholder
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)


class ConfigError(Exception):
    """Base class for fatal configuration errors"""


class ConfigReadError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class ConfigValidationError(ConfigError):
    pass


@dataclass(frozen=True)
class FieldSpec:
    """One response key and the values it is allowed to have"""
    key: str
    values: Tuple[str, ...] = ()

    def to_dict(self):
        return {'Key': self.key, 'Values': list(self.values)}


@dataclass(frozen=True)
class EndpointSpec:
    """A monitored URL with its validation rules"""
    url: str
    method: str = METHOD_GET
    match_any: bool = False
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)


class ConfigLoader:
    def __init__(self, path):
        self.path = path
        self.endpoints = None

    def load(self) -> List[EndpointSpec]:
        try:
            with open(self.path, encoding='utf-8') as f:
                raw = f.read()
        except OSError as e:
            raise ConfigReadError(f"cannot read config file {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError:
            # YAML only for non-JSON files: YAML 1.1 reads 1e3 as a string
            try:
                data = yaml.safe_load(raw)
            except yaml.YAMLError as e:
                raise ConfigParseError(f"cannot parse config file {self.path}: {e}") from e

        self.endpoints = self.load_data(data)
        return self.endpoints

    @classmethod
    def load_data(cls, data: Any) -> List[EndpointSpec]:
        """Turn decoded config data into endpoint specs"""
        if data is None:
            return []
        if not isinstance(data, list):
            raise ConfigParseError(f"config must be a list of endpoints, got {type(data).__name__}")
        return [cls._parse_endpoint(idx, entry) for idx, entry in enumerate(data)]

    @classmethod
    def _parse_endpoint(cls, idx: int, entry: Any) -> EndpointSpec:
        if not isinstance(entry, dict):
            raise ConfigParseError(f"endpoint #{idx} must be a mapping, got {type(entry).__name__}")
        entry = _lower_keys(entry)

        url = entry.get('url')
        if not isinstance(url, str) or len(url) < MIN_URL_LENGTH:
            raise ConfigValidationError(f"endpoint #{idx} has an empty or invalid Url: {entry}")

        method = entry.get('method') or METHOD_GET
        if not isinstance(method, str):
            raise ConfigParseError(f"endpoint #{idx}: Method must be a string")
        method = method.lower()
        if method not in METHODS:
            raise ConfigParseError(f"endpoint #{idx}: unsupported Method {method!r}")

        match_any = entry.get('any', False)
        if match_any is None:
            match_any = False
        if not isinstance(match_any, bool):
            raise ConfigParseError(f"endpoint #{idx}: Any must be a boolean")

        fields = entry.get('fields') or []
        if not isinstance(fields, list):
            raise ConfigParseError(f"endpoint #{idx}: Fields must be a list")

        return EndpointSpec(
            url=url,
            method=method,
            match_any=match_any,
            fields=tuple(cls._parse_field(idx, f) for f in fields),
        )

    @staticmethod
    def _parse_field(idx: int, raw: Any) -> FieldSpec:
        if isinstance(raw, dict):
            raw = _lower_keys(raw)
        if not isinstance(raw, dict) or not isinstance(raw.get('key'), str):
            raise ConfigParseError(f"endpoint #{idx}: each field needs a string Key")
        values = raw.get('values') or []
        if not isinstance(values, list):
            raise ConfigParseError(f"endpoint #{idx}: Values of field {raw['key']!r} must be a list")
        return FieldSpec(key=raw['key'], values=tuple(stringify(v) for v in values))


def _lower_keys(mapping: dict) -> dict:
    """Config keys are case-insensitive: Url, url and URL are the same key"""
    return {k.lower() if isinstance(k, str) else k: v for k, v in mapping.items()}
