from call_report import SdrRecord
from call_stats import FLAT, RANKED
from report_tables import Cell, render_project_table, render_section_html


def test_ranked_table_columns_and_order(sample_records):
    a_rows = [r for r in sample_records if r.project == "A"]
    section = render_project_table("A", list(reversed(a_rows)), RANKED)

    assert section.title == "A"
    assert section.headers == (
        "SDR", "Total Calls Dialed", "Calls Answered", "Connected %",
        "No. of working days", "No. of working hours", "Calls Dialed/Day", "Calls Dialed/Hour",
    )
    assert [row[0].text for row in section.rows] == ["Priya", "Jonas"]
    first = section.rows[0]
    assert first[3] == Cell("Connected %", "18.33%")
    assert first[6].text == "24"
    assert first[7].text == "5"


def test_flat_table_keeps_order_and_raw_values(sample_records):
    section = render_project_table("all", sample_records, FLAT)
    assert len(section.headers) == 7
    assert section.headers[:3] == ("Project", "SDR", "Total Calls")
    assert "Connected %" not in section.headers
    assert [row[1].text for row in section.rows] == ["Priya", "Marco", "Jonas"]


def test_every_cell_tagged_with_header(sample_records):
    section = render_project_table("A", sample_records, RANKED)
    for row in section.rows:
        assert tuple(c.header for c in row) == section.headers


def test_missing_values_render_empty():
    section = render_project_table("A", [SdrRecord(project="A", sdr="Dana")], RANKED)
    texts = [c.text for c in section.rows[0]]
    assert texts == ["Dana", "", "", "", "", "", "", ""]


def test_section_html_structure(sample_records):
    html = render_section_html(render_project_table("A & B", sample_records[:1], RANKED))
    assert '<div class="project-section">' in html
    assert '<h2 class="project-title">A &amp; B</h2>' in html
    assert html.count('<col style="width:12.5%">') == 8
    assert html.count("<th>") == 8
    assert '<td data-title="Connected %">18.33%</td>' in html
    assert '<td data-title="SDR">Priya</td>' in html


def test_section_html_escapes_cell_text():
    section = render_project_table("P", [SdrRecord(project="P", sdr="<script>x</script>")], FLAT)
    html = render_section_html(section)
    assert "<script>" not in html
    assert "&lt;script&gt;x&lt;/script&gt;" in html


def test_escape_keeps_zero():
    import report_page
    from report_tables import _h

    assert _h(0) == "0"
    assert _h(None) == ""
    assert report_page._h is _h
