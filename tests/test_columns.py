from app.services.columns import (
    CLASS,
    DATE,
    FATHER,
    IDENTIFIER,
    NAME,
    NOT_FOUND,
    STATUS,
    TIME,
    ColumnGroup,
    detect_column_groups,
    find_column,
    resolve_columns,
)


def test_identifier_matches_any_keyword_case_insensitively():
    assert find_column(["Name", "ADMISSION NO"], IDENTIFIER) == 1
    assert find_column(["Student ID", "Roll"], IDENTIFIER) == 0


def test_name_skips_parent_columns():
    header = ["Roll", "Father Name", "Mother Name", "Student Name"]
    assert find_column(header, NAME) == 3
    assert find_column(header, FATHER) == 1


def test_first_match_wins():
    assert find_column(["Class", "Class Teacher"], CLASS) == 0


def test_missing_role_returns_sentinel():
    assert find_column(["Roll", "Name"], DATE) == NOT_FOUND
    assert find_column([], STATUS) == NOT_FOUND


def test_empty_and_none_labels_are_ignored():
    assert find_column([None, "", "Time In"], TIME) == 2


def test_resolve_columns_covers_every_role():
    resolved = resolve_columns(["Roll No", "Name", "Date", "Status", "Late?"])
    assert resolved["identifier"] == 0
    assert resolved["name"] == 1
    assert resolved["date"] == 2
    assert resolved["status"] == 3
    assert resolved["time"] == 4
    assert resolved["school"] == NOT_FOUND


def test_groups_with_named_time_columns():
    header = ["Roll", "Name", "Date", "Status", "Time", "Date", "Status", "Time"]
    assert detect_column_groups(header, 0) == [
        ColumnGroup(2, 3, 4, True),
        ColumnGroup(5, 6, 7, True),
    ]


def test_groups_with_defaulted_time_columns_do_not_overlap():
    header = ["Roll", "01/01/2024", "Status", "01/02/2024", "Status"]
    groups = detect_column_groups(header, 0)

    assert groups == [
        ColumnGroup(1, 2, 3, False),
        ColumnGroup(3, 4, 5, False),
    ]
    claimed = [col for g in groups for col in (g.date_col, g.status_col)]
    assert len(claimed) == len(set(claimed))


def test_status_defaults_to_next_column():
    header = ["Roll", "2024-01-01", "P/A", "2024-01-02", "P/A"]
    groups = detect_column_groups(header, 0)
    assert [(g.date_col, g.status_col) for g in groups] == [(1, 2), (3, 4)]


def test_columns_before_identifier_are_ignored():
    header = ["Date", "Roll", "Name"]
    assert detect_column_groups(header, 1) == []


def test_no_date_columns():
    assert detect_column_groups(["Roll", "Name", "Class"], 0) == []
