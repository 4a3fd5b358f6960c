from __future__ import annotations

from pathlib import Path

import pytest

from folio.content import BLOG_DISABLED, CompiledBlog, compile_blog, reading_time
from folio.loader import ParseError


def _write_post(directory: Path, filename: str, frontmatter: str, body: str = "Post body.") -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_text(f"---\n{frontmatter.strip()}\n---\n{body}\n", encoding="utf-8")


def _compile(directory: Path, build_date: str = "2026-06-01") -> CompiledBlog:
    blog, _warnings = compile_blog(directory, build_date=build_date, default_author="Ada Lovelace")
    assert isinstance(blog, CompiledBlog)
    return blog


def test_reading_time_rounds_up_with_one_minute_minimum() -> None:
    assert reading_time("word " * 400) == 2
    assert reading_time("word " * 201) == 2
    assert reading_time("word " * 200) == 1
    assert reading_time("word") == 1
    assert reading_time("") == 1


def test_posts_are_sorted_newest_first(tmp_path: Path) -> None:
    _write_post(tmp_path, "2026-01-01-first.md", "title: First\npublish_on: 2026-01-01")
    _write_post(tmp_path, "2026-03-01-second.md", "title: Second\npublish_on: 2026-03-01")
    _write_post(tmp_path, "undated.md", "title: Undated")

    blog = _compile(tmp_path)

    assert [post.slug for post in blog.posts] == ["second", "first", "undated"]
    assert blog.posts[0].publish_on == "2026-03-01"
    assert blog.posts[2].publish_on is None


def test_drafts_scheduled_and_expired_posts_are_excluded(tmp_path: Path) -> None:
    _write_post(tmp_path, "live.md", "title: Live\npublish_on: 2026-05-01\nexpire_on: 2026-06-02")
    _write_post(tmp_path, "draft.md", "title: Draft\ndraft: true\npublish_on: 2026-05-01")
    _write_post(tmp_path, "future.md", "title: Future\npublish_on: 2026-06-02")
    _write_post(tmp_path, "expired.md", "title: Expired\npublish_on: 2026-01-01\nexpire_on: 2026-06-01")
    _write_post(tmp_path, "today.md", "title: Today\npublish_on: 2026-06-01")

    blog = _compile(tmp_path)

    assert [post.slug for post in blog.posts] == ["today", "live"]
    assert all(post.draft is False for post in blog.posts)


def test_no_publishable_posts_disables_blog(tmp_path: Path) -> None:
    _write_post(tmp_path, "draft.md", "title: Draft\ndraft: true")

    blog, warnings = compile_blog(tmp_path, build_date="2026-06-01")

    assert blog is BLOG_DISABLED
    assert blog.enabled is False
    assert blog.as_dict() is None
    assert warnings == []


def test_missing_directory_disables_blog(tmp_path: Path) -> None:
    blog, _ = compile_blog(tmp_path / "missing", build_date="2026-06-01")
    assert blog.enabled is False

    blog, _ = compile_blog(None)
    assert blog.enabled is False


def test_tag_index_lists_slugs_in_post_order(tmp_path: Path) -> None:
    _write_post(tmp_path, "a.md", "title: A\npublish_on: 2026-01-01\ntags: [python, yaml]")
    _write_post(tmp_path, "b.md", "title: B\npublish_on: 2026-02-01\ntags: [python]")
    _write_post(tmp_path, "c.md", "title: C\npublish_on: 2026-03-01")

    blog = _compile(tmp_path)

    assert blog.tags == {"python": ("b", "a"), "yaml": ("a",)}
    for tag, slugs in blog.tags.items():
        for slug in slugs:
            post = next(post for post in blog.posts if post.slug == slug)
            assert tag in post.tags


def test_post_fields_default_from_filename_and_profile(tmp_path: Path) -> None:
    _write_post(tmp_path, "2026-02-14-hello-world.md", "publish_on: '2026-02-14'", body="# Hello\n\nSome *text*.")

    post = _compile(tmp_path).posts[0]

    assert post.slug == "hello-world"
    assert post.title == "hello-world"
    assert post.author == "Ada Lovelace"
    assert post.description == ""
    assert post.image == ""
    assert post.tags == ()
    assert post.featured is False
    assert post.reading_time == 1
    assert "<h1>Hello</h1>" in post.content_html
    assert "<em>text</em>" in post.content_html


def test_explicit_slug_and_metadata_are_kept(tmp_path: Path) -> None:
    _write_post(
        tmp_path,
        "whatever.md",
        "slug: custom-slug\ntitle: Custom\nauthor: Guest\ndescription: Short\nfeatured: true\n"
        "image: /img/cover.png\ntags: solo\nupdated_on: 2026-05-20",
    )

    post = _compile(tmp_path).posts[0]

    assert post.slug == "custom-slug"
    assert post.author == "Guest"
    assert post.featured is True
    assert post.image == "/img/cover.png"
    assert post.tags == ("solo",)
    assert post.updated_on == "2026-05-20"


def test_featured_requires_a_real_boolean(tmp_path: Path) -> None:
    _write_post(tmp_path, "quoted.md", "title: Quoted\npublish_on: 2026-01-01\nfeatured: 'false'")
    _write_post(tmp_path, "flagged.md", "title: Flagged\npublish_on: 2026-02-01\nfeatured: true")

    posts = {post.slug: post for post in _compile(tmp_path).posts}

    assert posts["quoted"].featured is False
    assert posts["flagged"].featured is True


def test_frontmatter_slug_is_reduced_to_one_path_segment(tmp_path: Path) -> None:
    _write_post(tmp_path, "a.md", "title: A\npublish_on: 2026-01-01\nslug: ../../escape")
    _write_post(tmp_path, "b.md", "title: B\npublish_on: 2026-02-01\nslug: Hello World!")

    blog = _compile(tmp_path)

    assert [post.slug for post in blog.posts] == ["hello-world", "escape"]


def test_post_without_a_usable_slug_is_a_parse_error(tmp_path: Path) -> None:
    _write_post(tmp_path, "---.md", "title: Dashes\npublish_on: 2026-01-01")

    with pytest.raises(ParseError, match="Cannot derive a slug"):
        compile_blog(tmp_path, build_date="2026-06-01")


def test_summary_omits_rendered_content(tmp_path: Path) -> None:
    _write_post(tmp_path, "post.md", "title: Post\npublish_on: 2026-01-01")

    post = _compile(tmp_path).posts[0]

    assert "content_html" not in post.summary()
    assert post.as_dict()["content_html"] == post.content_html


def test_unparseable_dates_are_ignored_with_a_warning(tmp_path: Path) -> None:
    _write_post(tmp_path, "dated.md", "title: Dated\npublish_on: 2026-01-01")
    _write_post(tmp_path, "odd.md", "title: Odd\npublish_on: someday")

    blog, warnings = compile_blog(tmp_path, build_date="2026-06-01")

    assert isinstance(blog, CompiledBlog)
    assert [post.slug for post in blog.posts] == ["dated", "odd"]
    assert len(warnings) == 1
    assert 'publish_on in "odd.md"' in warnings[0]


def test_malformed_frontmatter_is_a_parse_error(tmp_path: Path) -> None:
    _write_post(tmp_path, "bad.md", "- just\n- a list")

    with pytest.raises(ParseError, match="bad.md"):
        compile_blog(tmp_path, build_date="2026-06-01")
