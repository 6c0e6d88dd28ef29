from seo_agent.processors import SignalExtractor, SoupDocument, match_keywords, slugify
from seo_agent.processors.normalize import normalize_plain_text

DICTIONARY = ("telegram", "秘密聊天", "群组", "bot")


def _extract(html, **kwargs):
    return SignalExtractor(DICTIONARY).extract(html, "https://rival.example/blog/1", "Rival", **kwargs)


def test_full_page_signal():
    html = """
    <html><head>
      <title>Page title</title>
      <meta name="description" content="  Secret chat   guide ">
    </head><body>
      <h1>Telegram秘密聊天教程</h1>
      <article>
        <h2>开启方法</h2>
        <h3>注意事项</h3>
        <p>使用Telegram 秘密聊天 很安全</p>
      </article>
    </body></html>
    """
    signal = _extract(html)

    assert signal.title == "Telegram秘密聊天教程"
    assert signal.description == "Secret chat guide"
    assert signal.headings == ("Telegram秘密聊天教程", "开启方法", "注意事项")
    assert signal.keywords == ("telegram", "秘密聊天")
    assert signal.source_competitor == "Rival"
    assert signal.published is None


def test_title_falls_back_to_title_tag_then_og_title():
    assert _extract("<html><head><title>From title</title></head><body></body></html>").title == "From title"

    og = '<html><head><meta property="og:title" content="From og"></head><body><p>x</p></body></html>'
    assert _extract(og).title == "From og"


def test_page_without_title_yields_nothing():
    assert _extract("<html><body><p>only text</p></body></html>") is None


def test_description_fallback_chain():
    og = '<html><head><meta property="og:description" content="og desc"></head><body><h1>T</h1></body></html>'
    assert _extract(og).description == "og desc"

    long_para = "长" * 300
    para = f"<html><body><h1>T</h1><p>{long_para}</p></body></html>"
    assert _extract(para).description == "长" * 200

    assert _extract("<html><body><h1>T</h1></body></html>").description is None


def test_long_headings_are_ignored():
    teaser = "x" * 120
    signal = _extract(f"<html><body><h1>Title</h1><h2>{teaser}</h2><h3>Short</h3></body></html>")
    assert signal.headings == ("Title", "Short")


def test_word_count_counts_non_whitespace_characters():
    signal = _extract("<html><body><h1>T</h1><article>秘密聊天 很安全\n ok</article></body></html>")
    assert signal.word_count == len("秘密聊天很安全ok")


def test_body_falls_back_to_whole_body_text():
    signal = _extract("<html><body><h1>Telegram</h1><div>加入群组</div></body></html>")
    assert signal.keywords == ("telegram", "群组")


def test_date_selector_prefers_datetime_attribute():
    html = '<html><body><h1>T</h1><time datetime="2024-05-01">May 1</time></body></html>'
    assert _extract(html, date_selector="time").published == "2024-05-01"

    html = '<html><body><h1>T</h1><span class="date"> 2024-06-02 </span></body></html>'
    assert _extract(html, date_selector=".date").published == "2024-06-02"


def test_match_keywords_is_case_insensitive_and_ordered_by_dictionary():
    assert match_keywords("A BOT in a TELEGRAM group", DICTIONARY) == ("telegram", "bot")
    assert match_keywords("", DICTIONARY) == ()


def test_match_keywords_folds_full_width_latin():
    assert match_keywords("ｔｅｌｅｇｒａｍ", DICTIONARY) == ("telegram",)


def test_soup_document_joins_multi_valued_attributes():
    doc = SoupDocument('<div class="post item">x</div>')
    node = doc.find_first("div")
    assert doc.get_attribute(node, "class") == "post item"
    assert doc.get_attribute(node, "id") is None


def test_normalize_plain_text_strips_bom_and_controls():
    assert normalize_plain_text("\ufeffhello\x07  world ") == "hello world"


def test_slugify_keeps_cjk_and_alphanumerics():
    assert slugify("Telegram 2025最新版下载 - 全平台安装指南") == "telegram-2025最新版下载-全平台安装指南"
    assert slugify("--Hello, World!--") == "hello-world"
    assert slugify("a" * 150, max_length=100) == "a" * 100
