from datetime import date

from edulog.backend.db.db_client import rows_affected
from edulog.backend.db.report_client import ReportFilters, build_report_query


def test_no_filters_adds_no_conditions():
    query, params = build_report_query(ReportFilters())

    assert params == []
    assert "$1" not in query
    assert query.rstrip().endswith("ORDER BY r.date DESC, r.report_id DESC;")


def test_each_filter_gets_the_next_placeholder():
    filters = ReportFilters(
        start_date=date(2026, 10, 1),
        end_date=date(2026, 10, 19),
        role="student",
        course="Algorithms",
        status="Present",
        student_name="jane",
    )

    query, params = build_report_query(filters)

    assert params == [date(2026, 10, 1), date(2026, 10, 19), "student", "Algorithms", "Present", "%jane%"]
    assert "r.date >= $1" in query
    assert "r.date <= $2" in query
    assert "u.role = $3" in query
    assert "c.course_name = $4" in query
    assert "a.status = $5" in query
    assert "s.name ILIKE $6" in query


def test_placeholders_stay_dense_when_filters_are_skipped():
    query, params = build_report_query(ReportFilters(end_date=date(2026, 10, 19), student_name="doe"))

    assert params == [date(2026, 10, 19), "%doe%"]
    assert "r.date <= $1" in query
    assert "s.name ILIKE $2" in query
    assert "$3" not in query


def test_values_are_never_inlined():
    query, params = build_report_query(ReportFilters(student_name="x' OR 1=1 --"))

    assert "OR 1=1" not in query
    assert params == ["%x' OR 1=1 --%"]


def test_rows_affected_reads_command_tags():
    assert rows_affected("UPDATE 1") == 1
    assert rows_affected("INSERT 0 1") == 1
    assert rows_affected("DELETE 0") == 0
    assert rows_affected("") == 0
