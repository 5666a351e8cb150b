"""Tests for repository targets and reference parsing."""

from __future__ import annotations

import pytest

from relman.core.config import Config, GitHubConfig, GitLabConfig
from relman.core.result import Err, Ok
from relman.repo.target import (
    GitHubProvider,
    GitLabProvider,
    ProviderKind,
    RepositoryTarget,
    parse_github_reference,
    parse_gitlab_reference,
)


class TestParseGitHubReference:
    def test_valid(self) -> None:
        result = parse_github_reference("snowdrop/spring-boot-bom/sb-2.7.x", token="tok")

        assert isinstance(result, Ok)
        target = result.value
        assert (target.org, target.repo, target.branch) == ("snowdrop", "spring-boot-bom", "sb-2.7.x")
        assert target.kind is ProviderKind.GITHUB
        assert target.remote_url == "https://github.com/snowdrop/spring-boot-bom.git"
        assert target.credentials.username == "tok"
        assert target.credentials.password == ""

    @pytest.mark.parametrize("reference", ["org/repo", "org/repo/branch/extra", "org//branch", ""])
    def test_malformed(self, reference: str) -> None:
        result = parse_github_reference(reference, token="tok")

        assert isinstance(result, Err)
        assert result.error.reference == reference
        assert "organization/repository/branch" in result.error.message

    def test_config_overrides_hosts(self) -> None:
        config = Config(github=GitHubConfig(host="ghe.example.com", raw_host="raw.ghe.example.com"))

        target = parse_github_reference("o/r/b", token="t", config=config).unwrap()

        assert target.remote_url == "https://ghe.example.com/o/r.git"
        assert target.raw_url("pom.xml") == "https://raw.ghe.example.com/o/r/b/pom.xml"


class TestParseGitLabReference:
    def test_valid_synthesizes_release_branch(self) -> None:
        result = parse_gitlab_reference("middleware/quarkus", release="2.13", user="me", token="tok")

        assert isinstance(result, Ok)
        target = result.value
        assert target.branch == "release-manager-2.13"
        assert target.kind is ProviderKind.GITLAB
        assert target.remote_url == "https://gitlab.cee.redhat.com/middleware/quarkus.git"
        assert target.credentials.username == "me"
        assert target.credentials.password == "tok"

    def test_three_segments_rejected(self) -> None:
        result = parse_gitlab_reference("a/b/c", release="1", user="me", token="tok")

        assert isinstance(result, Err)
        assert "organization/repository" in result.error.message

    def test_blank_release_rejected(self) -> None:
        result = parse_gitlab_reference("a/b", release="  ", user="me", token="tok")

        assert isinstance(result, Err)
        assert "release" in result.error.expected

    def test_config_overrides_host_and_default_branch(self) -> None:
        config = Config(gitlab=GitLabConfig(host="gitlab.example.com", default_branch="master"))

        target = parse_gitlab_reference("a/b", release="1", user="u", token="t", config=config).unwrap()

        assert target.remote_url == "https://gitlab.example.com/a/b.git"
        assert target.default_ref == "refs/heads/master"


class TestRepositoryTarget:
    def test_equality_ignores_credentials(self) -> None:
        a = parse_github_reference("o/r/b", token="one").unwrap()
        b = parse_github_reference("o/r/b", token="two").unwrap()

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_provider_kind_distinguishes(self) -> None:
        github = RepositoryTarget("o", "r", "release-manager-1", GitHubProvider(token="t"))
        gitlab = RepositoryTarget("o", "r", "release-manager-1", GitLabProvider(user="u", token="t"))

        assert github != gitlab

    def test_branch_distinguishes(self) -> None:
        a = parse_github_reference("o/r/b1", token="t").unwrap()
        b = parse_github_reference("o/r/b2", token="t").unwrap()

        assert a != b

    def test_refs_and_refspec(self) -> None:
        target = parse_github_reference("o/r/sb-2.7.x", token="t").unwrap()

        assert target.branch_ref == "refs/heads/sb-2.7.x"
        assert target.default_ref == "refs/heads/main"
        assert target.push_refspec == "sb-2.7.x:sb-2.7.x"

    def test_str_and_repr_hide_token(self) -> None:
        target = parse_github_reference("o/r/b", token="s3cr3t").unwrap()

        assert str(target) == "github:o/r@b"
        assert "s3cr3t" not in repr(target)
        assert "s3cr3t" not in repr(target.provider)

    def test_directory_prefixes(self) -> None:
        github = parse_github_reference("o/r/b", token="t").unwrap()
        gitlab = parse_gitlab_reference("o/r", release="1", user="u", token="t").unwrap()

        assert github.directory_prefix == "relman-o-r-"
        assert gitlab.directory_prefix == "release-manager-o-r-"


class TestRawUrl:
    def test_github(self) -> None:
        target = parse_github_reference("o/r/b", token="t").unwrap()

        assert target.raw_url("/docs/release.yml") == "https://raw.githubusercontent.com/o/r/b/docs/release.yml"
        assert target.provider.raw_headers() == {"Authorization": "token t"}

    def test_gitlab(self) -> None:
        target = parse_gitlab_reference("o/r", release="1.0", user="u", token="t").unwrap()

        assert target.raw_url("pom.xml") == "https://gitlab.cee.redhat.com/o/r/-/raw/release-manager-1.0/pom.xml"
        assert target.provider.raw_headers() == {"PRIVATE-TOKEN": "t"}

    def test_no_token_no_headers(self) -> None:
        assert GitHubProvider(token="").raw_headers() == {}


class TestCredentials:
    def test_github_token_is_masked(self) -> None:
        target = parse_github_reference("o/r/b", token="ghp_secret").unwrap()

        assert target.credentials.secrets == ("ghp_secret",)

    def test_gitlab_masks_token_not_user(self) -> None:
        target = parse_gitlab_reference("o/r", release="1", user="git", token="glpat").unwrap()

        assert target.credentials.secrets == ("glpat",)
