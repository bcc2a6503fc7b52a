# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for importing parsed price lists."""

import pytest

from otoraport.models.activity_log import ActivityLog
from otoraport.models.project import Project
from otoraport.models.property import Property
from otoraport.services.csv_parser import parse
from otoraport.services.property_import import PlanLimitExceeded, import_properties

WITHOUT_INVESTMENT = (
    "Nr lokalu;Powierzchnia;Cena;Status\n"
    "M1;42,0;380 000;wolne\n"
    "M2;55,5;499 500;sprzedane\n"
)


class TestImportProperties:
    """Test suite for import_properties."""

    def test_creates_project_and_properties(self, developer, sample_csv):
        summary = import_properties(developer, parse(sample_csv))

        assert summary.created == 3
        assert summary.updated == 0
        assert summary.total == 3
        assert summary.projects == ["Osiedle Zielone"]
        project = Project.get_by_name("Osiedle Zielone", developer.id)
        assert project is not None
        prop = Property.get_by_number(project.id, "A2")
        assert prop.area == 65.5
        assert prop.status == "sold"
        assert prop.raw_data["Nr lokalu"] == "A2"

    def test_reimport_updates(self, session, developer, sample_csv):
        import_properties(developer, parse(sample_csv))
        changed = sample_csv.replace("dostępne".encode(), "sprzedane".encode(), 1)

        summary = import_properties(developer, parse(changed))

        assert summary.created == 0
        assert summary.updated == 3
        assert Property.count_by_developer(developer.id) == 3
        project = Project.get_by_name("Osiedle Zielone", developer.id)
        assert Property.get_by_number(project.id, "A1").status == "sold"

    def test_default_project_name(self, developer):
        summary = import_properties(developer, parse(WITHOUT_INVESTMENT))
        assert summary.projects == ["Projekt Zielone Tarasy Sp. z o.o."]

    def test_rows_go_to_existing_project(self, developer, project):
        summary = import_properties(developer, parse(WITHOUT_INVESTMENT))

        assert summary.projects == [project.name]
        assert Project.count_by_developer(developer.id) == 1

    def test_rows_go_to_chosen_project(self, session, developer, project):
        other = Project(developer_id=developer.id, name="Osiedle B")
        session.add(other)
        session.commit()

        summary = import_properties(developer, parse(WITHOUT_INVESTMENT), other)

        assert summary.projects == ["Osiedle B"]
        assert Property.count(developer.id, project_id=other.id) == 2

    def test_invalid_rows_are_skipped(self, developer):
        content = (
            "Nr lokalu;Powierzchnia;Cena\n"
            "A1;50;450000\n"
            ";50;450000\n"
            "A3;0;450000\n"
        )

        summary = import_properties(developer, parse(content))

        assert summary.created == 1
        assert summary.skipped == 2
        assert "Wiersz 2: brak numeru lokalu" in summary.errors
        log = ActivityLog.query.filter_by(action="upload").one()
        assert log.status == "info"
        assert log.records_count == 1

    def test_warnings_are_collected(self, developer):
        content = "Nr lokalu;Powierzchnia;Cena za m2;Cena\nA1;50;9000;500000\n"

        summary = import_properties(developer, parse(content))

        assert summary.created == 1
        assert len(summary.warnings) == 1

    def test_new_project_over_plan_limit(self, developer, project):
        content = (
            "Nr lokalu;Powierzchnia;Cena;Inwestycja\n"
            "A1;50;450000;Nowe Osiedle\n"
        )

        with pytest.raises(PlanLimitExceeded) as exc_info:
            import_properties(developer, parse(content))

        assert exc_info.value.check.limit == 1
        assert Project.count_by_developer(developer.id) == 1
        assert Property.count_by_developer(developer.id) == 0

    def test_properties_over_plan_limit(self, developer):
        rows = "\n".join(f"L{i};50;450000" for i in range(201))
        content = f"Nr lokalu;Powierzchnia;Cena\n{rows}\n"

        with pytest.raises(PlanLimitExceeded) as exc_info:
            import_properties(developer, parse(content))

        assert exc_info.value.check.to_response()[0]["limit"] == 200
        assert Property.count_by_developer(developer.id) == 0

    def test_updates_do_not_count_against_limit(self, session, developer):
        rows = "\n".join(f"L{i};50;450000" for i in range(200))
        content = f"Nr lokalu;Powierzchnia;Cena\n{rows}\n"
        import_properties(developer, parse(content))

        summary = import_properties(developer, parse(content))
        assert summary.updated == 200

    def test_summary_to_dict(self, developer, sample_csv):
        data = import_properties(developer, parse(sample_csv)).to_dict()
        assert data == {
            "created": 3,
            "updated": 0,
            "skipped": 0,
            "total": 3,
            "projects": ["Osiedle Zielone"],
            "errors": [],
            "warnings": [],
        }
