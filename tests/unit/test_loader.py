"""Tests for shortsync.loader: parsing and validating the YAML link file."""

from __future__ import annotations

import pytest

from shortsync.errors import (
    ConfigEmptyError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    DocumentNotObjectError,
    DuplicateLinkError,
    EmptySlugError,
    ErrorCode,
    InvalidTagsTypeError,
    InvalidTagTypeError,
    InvalidTitleTypeError,
    InvalidUrlError,
    LinkNotObjectError,
    MissingDomainError,
    MissingLinksMapError,
    MissingUrlError,
)
from shortsync.loader import load_link_config, validate_document
from shortsync.models import DesiredDocument, LinkSpec


# =========================================================================
# Valid files
# =========================================================================


class TestLoadValid:
    def test_single_document(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  my-link:
    url: https://example.com
  another-link:
    url: https://test.com
    title: Test Link
    tags:
      - tag1
      - tag2
"""
        )
        config = load_link_config(path)

        assert len(config.documents) == 1
        doc = config.documents[0]
        assert doc.domain == "short.io"
        assert list(doc.links) == ["my-link", "another-link"]
        assert doc.links["my-link"] == LinkSpec(url="https://example.com")
        assert doc.links["another-link"] == LinkSpec(
            url="https://test.com", title="Test Link", tags=["tag1", "tag2"],
        )

    def test_title_and_tags_not_defaulted(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  a:\n    url: https://a.com\n")
        spec = load_link_config(path).documents[0].links["a"]
        assert spec.title is None
        assert spec.tags is None

    def test_multiple_documents_in_order(self, write_links):
        path = write_links(
            """
domain: first.io
links:
  link1:
    url: https://first.com
---
domain: second.io
links:
  link2:
    url: https://second.com
"""
        )
        config = load_link_config(path)

        assert [d.domain for d in config.documents] == ["first.io", "second.io"]
        assert config.documents[0].links["link1"].url == "https://first.com"
        assert config.documents[1].links["link2"].url == "https://second.com"

    def test_same_slug_on_different_domains(self, write_links):
        path = write_links(
            """
domain: first.io
links:
  my-link:
    url: https://first.com
---
domain: second.io
links:
  my-link:
    url: https://second.com
"""
        )
        assert len(load_link_config(path).documents) == 2

    def test_empty_links_map_is_valid(self, write_links):
        path = write_links("domain: s.io\nlinks: {}\n")
        assert load_link_config(path).documents[0].links == {}

    def test_empty_tag_list_passed_through(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  a:\n    url: https://a.com\n    tags: []\n")
        assert load_link_config(path).documents[0].links["a"].tags == []

    def test_accepts_str_path(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  a:\n    url: https://a.com\n")
        assert load_link_config(str(path)).documents[0].domain == "s.io"

    def test_numeric_slug_key_is_stringified(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  2024:\n    url: https://a.com\n")
        assert list(load_link_config(path).documents[0].links) == ["2024"]


# =========================================================================
# File-level failures
# =========================================================================


class TestLoadFileErrors:
    def test_missing_file(self, tmp_path):
        missing = tmp_path / "nope.yaml"
        with pytest.raises(ConfigNotFoundError, match="Config file not found") as exc_info:
            load_link_config(missing)
        assert exc_info.value.code == ErrorCode.CONFIG_NOT_FOUND
        assert exc_info.value.context["path"] == str(missing)

    def test_directory_is_not_a_config_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_link_config(tmp_path)

    def test_empty_file(self, write_links):
        with pytest.raises(ConfigEmptyError, match="Config file is empty"):
            load_link_config(write_links(""))

    def test_comment_only_file_is_empty(self, write_links):
        with pytest.raises(ConfigEmptyError):
            load_link_config(write_links("# nothing here\n"))

    def test_parse_error_reports_document_index(self, write_links):
        path = write_links(
            "domain: a.io\nlinks:\n  x:\n    url: https://x.com\n---\ndomain: [unclosed\n"
        )
        with pytest.raises(ConfigParseError, match="YAML parse error in document 2") as exc_info:
            load_link_config(path)
        assert exc_info.value.context["document_index"] == 2
        assert exc_info.value.context["parser_message"]
        assert exc_info.value.cause is not None

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_bytes(b"domain: \xff\xfe\n")
        with pytest.raises(ConfigParseError, match="not valid UTF-8"):
            load_link_config(path)

    def test_all_errors_are_config_errors(self, tmp_path):
        with pytest.raises(ConfigError):
            load_link_config(tmp_path / "missing.yaml")


# =========================================================================
# Document / link validation
# =========================================================================


class TestDocumentValidation:
    def test_non_object_document(self, write_links):
        with pytest.raises(DocumentNotObjectError, match="Document 1 must be an object"):
            load_link_config(write_links("just a string"))

    def test_null_document(self, write_links):
        path = write_links("domain: a.io\nlinks: {}\n---\n")
        with pytest.raises(DocumentNotObjectError, match="Document 2 must be an object"):
            load_link_config(path)

    def test_links_as_list_is_legacy_format(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  - slug: my-link
    url: https://example.com
"""
        )
        with pytest.raises(MissingLinksMapError, match='Document 1 must have a "links" map'):
            load_link_config(path)

    def test_missing_links(self, write_links):
        path = write_links("domain: short.io\nother_key: value\n")
        with pytest.raises(MissingLinksMapError, match=r"\(use slug as key\)"):
            load_link_config(path)

    def test_scalar_links(self, write_links):
        with pytest.raises(MissingLinksMapError):
            load_link_config(write_links("domain: short.io\nlinks: nope\n"))

    def test_missing_domain(self, write_links):
        path = write_links("links:\n  my-link:\n    url: https://example.com\n")
        with pytest.raises(
            MissingDomainError, match='Document 1 must have a non-empty "domain" string',
        ):
            load_link_config(path)

    @pytest.mark.parametrize("domain", ['""', '"   "', "123", "[a.io]"])
    def test_invalid_domain(self, write_links, domain):
        path = write_links(f"domain: {domain}\nlinks:\n  a:\n    url: https://a.com\n")
        with pytest.raises(MissingDomainError):
            load_link_config(path)

    def test_domain_checked_before_links(self, write_links):
        with pytest.raises(MissingDomainError):
            load_link_config(write_links("links: [1, 2]\n"))

    def test_blank_slug(self, write_links):
        path = write_links('domain: s.io\nlinks:\n  "  ":\n    url: https://a.com\n')
        with pytest.raises(
            EmptySlugError, match="Document 1: link slug \\(key\\) must be a non-empty string",
        ):
            load_link_config(path)

    def test_null_slug(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  ~:\n    url: https://a.com\n")
        with pytest.raises(EmptySlugError):
            load_link_config(path)

    def test_link_not_object(self, write_links):
        path = write_links("domain: s.io\nlinks:\n  my-link: https://a.com\n")
        with pytest.raises(LinkNotObjectError, match='Document 1: link "my-link" must be an object'):
            load_link_config(path)

    def test_missing_url(self, write_links):
        path = write_links("domain: short.io\nlinks:\n  my-link:\n    title: Missing URL\n")
        with pytest.raises(
            MissingUrlError,
            match='Document 1: link "my-link" must have a non-empty "url" string',
        ):
            load_link_config(path)

    def test_blank_url(self, write_links):
        path = write_links('domain: short.io\nlinks:\n  my-link:\n    url: "  "\n')
        with pytest.raises(MissingUrlError):
            load_link_config(path)

    @pytest.mark.parametrize("url", ["not-a-valid-url", "/relative/path", "https://", "example.com"])
    def test_invalid_url(self, write_links, url):
        path = write_links(f"domain: short.io\nlinks:\n  my-link:\n    url: {url}\n")
        with pytest.raises(InvalidUrlError, match='Document 1: link "my-link" has invalid URL') as exc_info:
            load_link_config(path)
        assert exc_info.value.context["url"] == url

    def test_non_string_title(self, write_links):
        path = write_links(
            "domain: short.io\nlinks:\n  my-link:\n    url: https://example.com\n    title: 123\n"
        )
        with pytest.raises(InvalidTitleTypeError, match='link "my-link" "title" must be a string'):
            load_link_config(path)

    def test_null_title_counts_as_present(self, write_links):
        path = write_links(
            "domain: short.io\nlinks:\n  my-link:\n    url: https://example.com\n    title:\n"
        )
        with pytest.raises(InvalidTitleTypeError):
            load_link_config(path)

    def test_non_list_tags(self, write_links):
        path = write_links(
            "domain: short.io\nlinks:\n  my-link:\n    url: https://example.com\n    tags: not-a-list\n"
        )
        with pytest.raises(InvalidTagsTypeError, match='link "my-link" "tags" must be a list'):
            load_link_config(path)

    def test_non_string_tag(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  my-link:
    url: https://example.com
    tags:
      - valid
      - 123
"""
        )
        with pytest.raises(InvalidTagTypeError, match='link "my-link" tags must all be strings') as exc_info:
            load_link_config(path)
        assert exc_info.value.context["tag"] == 123

    def test_errors_report_correct_document(self, write_links):
        path = write_links(
            """
domain: first.io
links:
  link1:
    url: https://valid.com
---
domain: second.io
links:
  link2:
    url: invalid-url
"""
        )
        with pytest.raises(InvalidUrlError, match='Document 2: link "link2" has invalid URL') as exc_info:
            load_link_config(path)
        assert exc_info.value.context == {
            "document_index": 2, "slug": "link2", "url": "invalid-url",
        }


# =========================================================================
# Duplicate detection
# =========================================================================


class TestDuplicates:
    def test_duplicate_across_documents(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  my-link:
    url: https://example.com
---
domain: short.io
links:
  my-link:
    url: https://other.com
"""
        )
        with pytest.raises(DuplicateLinkError, match="Duplicate link: short.io/my-link") as exc_info:
            load_link_config(path)
        assert exc_info.value.context["key"] == "short.io/my-link"
        assert exc_info.value.context["document_index"] == 2

    def test_same_slug_twice_in_one_document(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  a:
    url: https://first.com
  a:
    url: https://second.com
"""
        )
        with pytest.raises(ConfigParseError, match='duplicate key "a"') as exc_info:
            load_link_config(path)
        assert exc_info.value.context["document_index"] == 1

    def test_repeated_key_reported_in_its_document(self, write_links):
        path = write_links(
            "domain: a.io\nlinks: {}\n---\ndomain: b.io\ndomain: c.io\nlinks: {}\n"
        )
        with pytest.raises(ConfigParseError, match="YAML parse error in document 2") as exc_info:
            load_link_config(path)
        assert 'duplicate key "domain"' in exc_info.value.context["parser_message"]

    def test_merge_keys_still_allowed(self, write_links):
        path = write_links(
            """
domain: short.io
links:
  base: &base
    url: https://base.com
    title: Base
  derived:
    <<: *base
    url: https://derived.com
"""
        )
        links = load_link_config(path).documents[0].links
        assert links["derived"] == LinkSpec(url="https://derived.com", title="Base")

    def test_seen_set_is_shared_and_cumulative(self):
        seen: set[str] = set()
        validate_document(
            {"domain": "a.io", "links": {"x": {"url": "https://x.com"}}}, 1, seen,
        )
        validate_document(
            {"domain": "b.io", "links": {"x": {"url": "https://x.com"}}}, 2, seen,
        )
        assert seen == {"a.io/x", "b.io/x"}
        with pytest.raises(DuplicateLinkError, match="a.io/x"):
            validate_document(
                {"domain": "a.io", "links": {"x": {"url": "https://y.com"}}}, 3, seen,
            )

    def test_duplicate_detected_before_link_validation(self):
        seen = {"a.io/x"}
        with pytest.raises(DuplicateLinkError):
            validate_document({"domain": "a.io", "links": {"x": "not-an-object"}}, 1, seen)

    def test_validate_document_returns_model(self):
        doc = validate_document(
            {"domain": "a.io", "links": {"x": {"url": "https://x.com", "tags": ["t"]}}},
            1,
            set(),
        )
        assert doc == DesiredDocument(
            domain="a.io", links={"x": LinkSpec(url="https://x.com", tags=["t"])},
        )
