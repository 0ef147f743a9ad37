import json
from typing import Dict, Iterable, Optional, Sequence, Union

import requests

from url_monitor.modules.config_loader import (
    METHOD_GET,
    METHOD_POST,
    EndpointSpec,
    FieldSpec,
    stringify,
)
from url_monitor.modules.reporter import CheckFailure, FailureReport

DEFAULT_TIMEOUT = 10.0
DEFAULT_OK_STATUSES = (200,)

ResponseView = Dict[str, str]


class ResponseFormatError(ValueError):
    pass


def build_response_view(body: Union[bytes, str]) -> ResponseView:
    """Flatten a JSON object body into key -> canonical string"""
    try:
        # bytes let json pick UTF-8/16/32 instead of the HTTP charset guess
        data = json.loads(body)
    except ValueError as e:
        raise ResponseFormatError(str(e)) from e
    if not isinstance(data, dict):
        raise ResponseFormatError(f"expected a JSON object, got {type(data).__name__}")
    return {str(k): stringify(v) for k, v in data.items()}


def check_field(field: FieldSpec, view: ResponseView) -> bool:
    if field.key not in view:
        return False
    # no values configured: the key being present is enough
    if not field.values:
        return True
    return view[field.key] in field.values


def fields_satisfied(fields: Sequence[FieldSpec], view: ResponseView, match_any: bool) -> bool:
    results = [check_field(f, view) for f in fields]
    if match_any:
        return any(results)
    return all(results)


def describe_fields(fields: Iterable[FieldSpec]) -> str:
    return json.dumps([f.to_dict() for f in fields], ensure_ascii=False)


class HealthCheck:
    def __init__(self, session=None, timeout: float = DEFAULT_TIMEOUT,
                 ok_statuses: Iterable[int] = DEFAULT_OK_STATUSES):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.ok_statuses = tuple(ok_statuses)

    def request(self, spec: EndpointSpec) -> requests.Response:
        method = (spec.method or METHOD_GET).lower()
        if method == METHOD_POST:
            return self.session.post(spec.url, data=b'', timeout=self.timeout)
        return self.session.get(spec.url, timeout=self.timeout)

    def check(self, spec: EndpointSpec) -> Optional[CheckFailure]:
        """Run one endpoint check, returning None when it passes"""
        try:
            response = self.request(spec)
        except requests.RequestException as e:
            return CheckFailure(url=spec.url, msg=str(e))

        if response.status_code not in self.ok_statuses:
            return CheckFailure(
                url=spec.url,
                msg=f"unexpected status code {response.status_code}, allowed: {list(self.ok_statuses)}",
            )

        if not spec.fields:
            return None

        try:
            view = build_response_view(response.content)
        except ResponseFormatError as e:
            return CheckFailure(url=spec.url, msg=f"invalid JSON response: {e}")

        if fields_satisfied(spec.fields, view, spec.match_any):
            return None
        return CheckFailure(
            url=spec.url,
            msg=f"response ({response.text}) does not match fields ({describe_fields(spec.fields)})",
        )


def run_checks(specs: Iterable[EndpointSpec], checker: HealthCheck,
               report: FailureReport, verbose: bool = False) -> FailureReport:
    """Check every endpoint in order and collect the failures into report"""
    for spec in specs:
        failure = checker.check(spec)
        if failure is None:
            if verbose:
                report.print_ok(spec.url)
            continue
        report.print_failure(failure)
        report.add(failure)
    return report
