"""Tests for raw-content reads."""

from __future__ import annotations

import asyncio

from relman.core.result import Err, Ok
from relman.repo.raw import HttpClient, HttpError, MockHttpClient, UrllibHttpClient, read_raw_file
from relman.repo.target import parse_github_reference, parse_gitlab_reference


class TestReadRawFile:
    def test_github_uses_raw_host_and_token_header(self) -> None:
        target = parse_github_reference("o/r/b", token="tok").unwrap()
        client = MockHttpClient()
        client.set_text("https://raw.githubusercontent.com/o/r/b/release.yml", "version: 1\n")

        result = asyncio.run(read_raw_file(target, "release.yml", client=client))

        assert result == Ok("version: 1\n")
        assert client.calls == [
            ("https://raw.githubusercontent.com/o/r/b/release.yml", {"Authorization": "token tok"})
        ]

    def test_gitlab_uses_private_token_header(self) -> None:
        target = parse_gitlab_reference("o/r", release="1.0", user="u", token="tok").unwrap()
        client = MockHttpClient()
        client.set_text("https://gitlab.cee.redhat.com/o/r/-/raw/release-manager-1.0/pom.xml", "<project/>")

        result = asyncio.run(read_raw_file(target, "pom.xml", client=client))

        assert result == Ok("<project/>")
        assert client.calls[0][1] == {"PRIVATE-TOKEN": "tok"}

    def test_missing_file_maps_to_access_error(self) -> None:
        target = parse_github_reference("o/r/b", token="tok").unwrap()

        result = asyncio.run(read_raw_file(target, "missing.txt", client=MockHttpClient()))

        assert isinstance(result, Err)
        assert result.error.operation == "raw"
        assert result.error.target == "github:o/r@b"
        assert "HTTP 404" in result.error.message

    def test_canned_error(self) -> None:
        target = parse_github_reference("o/r/b", token="tok").unwrap()
        url = target.raw_url("a.txt")
        client = MockHttpClient()
        client.set_text(url, HttpError(url=url, status=0, message="connection refused"))

        result = asyncio.run(read_raw_file(target, "a.txt", client=client))

        assert isinstance(result, Err)
        assert result.error.message == f"connection refused ({url})"


def test_clients_satisfy_protocol() -> None:
    assert isinstance(MockHttpClient(), HttpClient)
    assert isinstance(UrllibHttpClient(), HttpClient)
