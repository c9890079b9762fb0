"""
Unit tests for QuestionRepository.
"""

import pytest

from quizseed.core.exceptions import DatabaseError
from quizseed.seeding import BatchRunner, question_fingerprint
from quizseed.storage import QuestionRepository
from quizseed.storage.models import Answer, Category, Question, Subcategory


def add_question(session, category, subcategory, text, identifier=None, certification=False):
    question = Question(
        text=text,
        type="true_false",
        difficulty=2,
        is_certification=certification,
        identifier=identifier,
        category=category,
        subcategory=subcategory,
    )
    question.answers.append(Answer(text="True", is_correct=True))
    question.answers.append(Answer(text="False", is_correct=False))
    session.add(question)
    return question


@pytest.fixture
def php(test_db_session):
    category = Category(name="PHP", description="PHP", icon="terminal", color="#777BB4")
    oop = Subcategory(name="OOP", description="OOP", category=category)
    test_db_session.add_all([category, oop])
    test_db_session.commit()
    return category, oop


class TestQuestionRepository:
    """Test cases for QuestionRepository."""

    def test_statistics(self, store, test_db_session, reference_batch, question_batch, make_question):
        """Test totals and distributions after a seeding run."""
        records = [
            make_question(),
            make_question(text="Symfony commands extend Command.", category="Symfony",
                          subcategory="Console", certification=True, difficulty=2),
        ]
        BatchRunner(store).run([reference_batch, question_batch(records=records)])

        stats = QuestionRepository(test_db_session).get_statistics()

        assert stats['total_categories'] == 2
        assert stats['total_subcategories'] == 4
        assert stats['total_questions'] == 2
        assert stats['total_answers'] == 4
        assert stats['total_users'] == 1
        assert stats['certification_questions'] == 1
        assert stats['category_distribution'] == {'PHP': 1, 'Symfony': 1}
        assert stats['type_distribution'] == {'true_false': 2}
        assert stats['difficulty_distribution'] == {1: 1, 2: 1}

    def test_empty_database(self, test_db_session):
        """Test statistics with no data."""
        repo = QuestionRepository(test_db_session)

        assert repo.count_questions() == 0
        assert repo.get_statistics()['category_distribution'] == {}

    def test_count_questions_filters(self, test_db_session, php):
        """Test category and certification filters."""
        category, oop = php
        add_question(test_db_session, category, oop, "First?", certification=True)
        add_question(test_db_session, category, oop, "Second?")
        test_db_session.commit()

        repo = QuestionRepository(test_db_session)
        assert repo.count_questions(category="PHP") == 2
        assert repo.count_questions(category="Symfony") == 0
        assert repo.count_questions(certification=True) == 1

    def test_find_duplicate_groups(self, test_db_session, php):
        """Test grouping by trimmed, lower-cased text."""
        category, oop = php
        first = add_question(test_db_session, category, oop, "What is a trait?")
        add_question(test_db_session, category, oop, "what is a trait? ")
        add_question(test_db_session, category, oop, "WHAT IS A TRAIT?  ")
        add_question(test_db_session, category, oop, "What is an enum?")
        test_db_session.commit()

        groups = QuestionRepository(test_db_session).find_duplicate_groups()

        assert len(groups) == 1
        assert groups[0]['count'] == 3
        assert groups[0]['text'] == "What is a trait?"
        assert groups[0]['ids'][0] == first.id
        assert groups[0]['ids'] == sorted(groups[0]['ids'])

    def test_delete_duplicates_keeps_lowest_id(self, test_db_session, php):
        """Test that deleting duplicates keeps the first question and its answers."""
        category, oop = php
        first = add_question(test_db_session, category, oop, "What is a trait?")
        add_question(test_db_session, category, oop, "what is a trait?")
        test_db_session.commit()
        first_id = first.id

        repo = QuestionRepository(test_db_session)
        assert repo.delete_duplicates() == 1

        remaining = test_db_session.query(Question).all()
        assert [question.id for question in remaining] == [first_id]
        assert test_db_session.query(Answer).count() == 2
        assert repo.find_duplicate_groups() == []

    def test_backfill_identifiers(self, test_db_session, php):
        """Test fingerprints assigned to questions without one."""
        category, oop = php
        question = add_question(test_db_session, category, oop, "What is a trait?")
        add_question(test_db_session, category, oop, "What is an enum?", identifier="existing")
        test_db_session.commit()

        repo = QuestionRepository(test_db_session)
        assert repo.backfill_identifiers() == 1

        expected = question_fingerprint("What is a trait?", "PHP", "OOP", [("True", True), ("False", False)])
        assert question.identifier == expected
        assert repo.backfill_identifiers() == 0

    def test_backfill_suffixes_collisions(self, test_db_session, php):
        """Test that a fingerprint already in use gets a numeric suffix."""
        category, oop = php
        taken = question_fingerprint("What is a trait?", "PHP", "OOP", [("True", True), ("False", False)])
        add_question(test_db_session, category, oop, "What is a trait? ", identifier=taken)
        question = add_question(test_db_session, category, oop, "What is a trait?", identifier="")
        test_db_session.commit()

        QuestionRepository(test_db_session).backfill_identifiers()

        assert question.identifier == f"{taken}_1"

    def test_database_errors_are_wrapped(self):
        """Test that query failures raise DatabaseError."""
        class BrokenSession:
            def query(self, *args):
                raise RuntimeError("connection lost")

        with pytest.raises(DatabaseError) as exc_info:
            QuestionRepository(BrokenSession()).count_questions()
        assert exc_info.value.table == "questions"
