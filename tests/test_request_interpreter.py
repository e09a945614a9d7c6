"""Both request shapes normalise to the same FetchRequest."""

from __future__ import annotations

import pytest

from tarball_service.config import Settings
from tarball_service.errors import RequestMalformed
from tarball_service.models import SnapshotRequestBody
from tarball_service.services import RequestInterpreter
from tarball_service.services.request_interpreter import repo_name_from_url


@pytest.fixture
def interpreter():
    return RequestInterpreter(Settings())


def test_path_form_full_example(interpreter):
    req = interpreter.from_path("github.com/acme/widgets/lib", ref="v2", timeout="30")

    assert req.spec.repo_url == "https://github.com/acme/widgets"
    assert req.spec.repo_name == "widgets"
    assert req.spec.ref == "v2"
    assert req.spec.sub_path == "lib"
    assert req.timeout == 30


def test_path_form_defaults_match_explicit_values(interpreter):
    implicit = interpreter.from_path("github.com/acme/widgets")
    explicit = interpreter.from_path("github.com/acme/widgets", ref="main", timeout="120")
    empty = interpreter.from_path("github.com/acme/widgets", ref="", timeout="")

    assert implicit == explicit == empty
    assert implicit.spec.sub_path == ""


def test_path_form_joins_remaining_segments(interpreter):
    req = interpreter.from_path("/gitlab.example.com/team/tool/src/pkg/mod")

    assert req.spec.repo_url == "https://gitlab.example.com/team/tool"
    assert req.spec.sub_path == "src/pkg/mod"


@pytest.mark.parametrize("path", ["", "github.com", "github.com/acme", "github.com//widgets"])
def test_path_form_needs_three_segments(interpreter, path):
    with pytest.raises(RequestMalformed) as excinfo:
        interpreter.from_path(path)

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Invalid URL format. Expected: /provider/owner/repo/path"


@pytest.mark.parametrize("timeout", ["abc", "1.5", "10s", "3_0", " 30 ", "\u0663\u0660", "0x1e"])
def test_path_form_rejects_bad_timeout(interpreter, timeout):
    with pytest.raises(RequestMalformed) as excinfo:
        interpreter.from_path("github.com/acme/widgets", timeout=timeout)

    assert excinfo.value.message == "Invalid timeout value"


def test_body_form(interpreter):
    body = SnapshotRequestBody.model_validate(
        {"path": "lib", "repoURL": "https://github.com/acme/widgets", "targetRevision": "v2"}
    )
    req = interpreter.from_body(body)

    assert req.spec.repo_url == "https://github.com/acme/widgets"
    assert req.spec.repo_name == "widgets"
    assert req.spec.ref == "v2"
    assert req.spec.sub_path == "lib"
    assert req.timeout == 20


@pytest.mark.parametrize(
    "payload",
    [
        {"repoURL": "https://github.com/acme/widgets"},
        {"targetRevision": "main"},
        {"repoURL": "", "targetRevision": "main"},
        {},
    ],
)
def test_body_form_requires_repo_url_and_revision(interpreter, payload):
    with pytest.raises(RequestMalformed) as excinfo:
        interpreter.from_body(SnapshotRequestBody.model_validate(payload))

    assert excinfo.value.message == "Missing required fields: repoURL and targetRevision"


@pytest.mark.parametrize(
    "url,name",
    [
        ("https://github.com/acme/widgets", "widgets"),
        ("https://github.com/acme/widgets/", "widgets"),
        ("http://git.internal:8443/team/tool/extra", "tool"),
    ],
)
def test_repo_name_is_second_path_segment(url, name):
    assert repo_name_from_url(url) == name


@pytest.mark.parametrize("url", ["https://github.com/acme", "github.com/acme/widgets", "not a url"])
def test_repo_name_rejects_short_urls(url):
    with pytest.raises(RequestMalformed):
        repo_name_from_url(url)


@pytest.mark.parametrize("timeout,seconds", [("30", 30), ("+30", 30), ("-1", -1), ("007", 7)])
def test_path_form_timeout_accepts_signed_ascii_digits(interpreter, timeout, seconds):
    assert interpreter.from_path("github.com/acme/widgets", timeout=timeout).timeout == seconds
