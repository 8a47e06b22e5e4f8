"""Tests for ADF reading and writing."""

from sentry_sensei.formatting.adf import (
    BulletList,
    CodeBlock,
    OrderedList,
    Paragraph,
    adf_to_blocks,
    blocks_to_adf,
    extract_text,
    text_to_adf,
    text_to_blocks,
)


def test_extract_text_from_paragraphs():
    document = {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Hello "},
                    {"type": "text", "text": "world", "marks": [{"type": "strong"}]},
                ],
            },
            {"type": "paragraph", "content": [{"type": "text", "text": "Second"}]},
        ],
    }
    assert extract_text(document) == "Hello world\nSecond"


def test_extract_text_lists_and_code():
    document = {
        "type": "doc",
        "content": [
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "one"}]}
                        ],
                    },
                    {
                        "type": "listItem",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "two"}]}
                        ],
                    },
                ],
            },
            {
                "type": "orderedList",
                "attrs": {"order": 3},
                "content": [
                    {
                        "type": "listItem",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "three"}]}
                        ],
                    }
                ],
            },
            {"type": "codeBlock", "content": [{"type": "text", "text": "x = 1"}]},
        ],
    }
    assert extract_text(document) == "• one\n• two\n3. three\n```\nx = 1\n```"


def test_extract_text_inline_nodes():
    document = {
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "mention", "attrs": {"id": "1", "text": "@Dana"}},
                    {"type": "text", "text": " see"},
                    {"type": "hardBreak"},
                    {"type": "inlineCard", "attrs": {"url": "https://x.test"}},
                ],
            }
        ],
    }
    assert extract_text(document) == "@Dana see\nhttps://x.test"


def test_extract_text_passes_plain_strings_through():
    assert extract_text("plain description") == "plain description"


def test_extract_text_empty_inputs():
    assert extract_text(None) == ""
    assert extract_text({"type": "doc", "content": []}) == ""
    assert extract_text("   ") == ""


def test_adf_to_blocks_descends_into_unknown_containers():
    document = {
        "type": "doc",
        "content": [
            {
                "type": "layoutSection",
                "content": [
                    {"type": "paragraph", "content": [{"type": "text", "text": "nested"}]}
                ],
            }
        ],
    }
    assert adf_to_blocks(document) == [Paragraph("nested")]


def test_text_to_blocks_groups_bullets():
    text = "Intro\n- first\n• second\n\nOutro"
    assert text_to_blocks(text) == [
        Paragraph("Intro"),
        BulletList(("first", "second")),
        Paragraph("Outro"),
    ]


def test_text_to_blocks_skips_empty_bullets():
    assert text_to_blocks("- first\n-\n•  \n- second") == [BulletList(("first", "second"))]
    assert text_to_blocks("Intro\n-") == [Paragraph("Intro")]


def test_text_to_adf_never_emits_empty_text_nodes():
    document = text_to_adf("Notes\n- \n- keep")
    bullet_list = document["content"][1]
    assert len(bullet_list["content"]) == 1
    assert bullet_list["content"][0]["content"][0]["content"] == [{"type": "text", "text": "keep"}]


def test_text_to_adf_structure():
    document = text_to_adf("Steps:\n- open cart")
    assert document == {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "Steps:"}]},
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [
                            {
                                "type": "paragraph",
                                "content": [{"type": "text", "text": "open cart"}],
                            }
                        ],
                    }
                ],
            },
        ],
    }


def test_blocks_to_adf_ordered_list_and_code():
    document = blocks_to_adf([OrderedList(("a",), start=2), CodeBlock("print()")])
    assert document["content"][0]["type"] == "orderedList"
    assert document["content"][0]["attrs"] == {"order": 2}
    assert document["content"][1] == {
        "type": "codeBlock",
        "content": [{"type": "text", "text": "print()"}],
    }


def test_text_survives_adf_conversion():
    text = "Summary line\n• bullet one\n• bullet two"
    assert extract_text(text_to_adf(text)) == text
