"""
Tests for the application facade and the live/cache fallback.

The fetcher is a mock, so these tests cover:
- registration and the current user
- write-through of live results into the cache
- fallback to the cache on NetworkFailure
- the AuthorizationRequired short-circuit (no fetcher call at all)
"""

import unittest
from unittest import mock

from portalsdk.application import Application
from portalsdk.cache import RecordCache
from portalsdk.config import Settings
from portalsdk.errors import AuthorizationRequired, NetworkFailure
from portalsdk.fetcher import Fetcher
from portalsdk.model import Course, Person, User
from portalsdk.options import fingerprint


COURSES = [
    Course("C001", "Linear Algebra", ["Wang Li"], "2013-2014 1", "Math", 4.0),
    Course("C002", "Data Structures", ["Zhang Wei"], "2013-2014 2", "CS", 3.0),
]
PEOPLE = [Person("T01", "Wang Li", "Math", "Professor")]


class _AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.fetcher = mock.Mock(spec=Fetcher)
        self.fetcher.confirm.return_value = True
        self.fetcher.search_for_courses.return_value = list(COURSES)
        self.fetcher.search_for_people.return_value = list(PEOPLE)
        self.app = Application(cache=RecordCache(), fetcher=self.fetcher, settings=Settings())


class TestRegister(_AppTestCase):
    def test_first_confirmed_user_becomes_current(self) -> None:
        user = self.app.register("2012019050020", "811073")
        self.assertTrue(user.confirmed)
        self.assertIs(self.app.current_user, user)
        self.assertIs(self.app.one("2012019050020"), user)

    def test_current_user_is_set_only_once(self) -> None:
        first = self.app.register("2012019050020", "a")
        second = self.app.register("2013019050021", "b")
        self.assertIs(self.app.current_user, first)
        self.assertFalse(second.confirmed)
        self.assertEqual(self.fetcher.confirm.call_count, 1)
        self.assertEqual(self.app.cache.users(), [first, second])

    def test_rejected_credentials_leave_no_current_user(self) -> None:
        self.fetcher.confirm.return_value = False
        user = self.app.register("2012019050020", "wrong")
        self.assertFalse(user.confirmed)
        self.assertIsNone(self.app.current_user)
        self.assertIs(self.app.one("2012019050020"), user)

    def test_network_failure_during_confirm(self) -> None:
        self.fetcher.confirm.side_effect = NetworkFailure("down")
        user = self.app.register("2012019050020", "pw")
        self.assertFalse(user.confirmed)
        self.assertIsNone(self.app.current_user)

    def test_one_unknown_id(self) -> None:
        self.assertIsNone(self.app.one("nobody"))

    def test_registered_user_semesters(self) -> None:
        self.app.register("2012019050020", "811073")
        semesters = self.app.one("2012019050020").semesters
        self.assertEqual(len(semesters), 8)
        self.assertEqual(semesters[0], 13)

    def test_registered_user_uses_app_settings(self) -> None:
        app = Application(cache=RecordCache(), fetcher=self.fetcher, settings=Settings(baseline_year=2010))
        user = app.register("2012019050020", "811073")
        self.assertEqual(user.semesters[0], 5)
        self.assertEqual(app.one("2012019050020").semesters, list(range(5, 13)))

    def test_register_current_user_again_keeps_cache_consistent(self) -> None:
        first = self.app.register("2012019050020", "pw")
        again = self.app.register("2012019050020", "pw")
        self.assertIs(again, first)
        self.assertIs(self.app.one("2012019050020"), self.app.current_user)
        self.assertTrue(self.app.one("2012019050020").confirmed)
        self.assertEqual(self.fetcher.confirm.call_count, 1)

    def test_register_current_user_with_new_password(self) -> None:
        first = self.app.register("2012019050020", "old")

        self.fetcher.confirm.return_value = False
        rejected = self.app.register("2012019050020", "wrong")
        self.assertFalse(rejected.confirmed)
        self.assertIs(self.app.current_user, first)
        self.assertIs(self.app.one("2012019050020"), first)

        self.fetcher.confirm.return_value = True
        renewed = self.app.register("2012019050020", "new")
        self.assertTrue(renewed.confirmed)
        self.assertIs(self.app.current_user, renewed)
        self.assertIs(self.app.one("2012019050020"), renewed)

    def test_verify_does_not_register(self) -> None:
        self.assertTrue(self.app.verify("2012019050020", "pw"))
        self.assertIsNone(self.app.one("2012019050020"))
        self.assertIsNone(self.app.current_user)


class TestAuthorization(_AppTestCase):
    def test_search_without_user_short_circuits(self) -> None:
        for search in (
            self.app.search_for_courses,
            self.app.search_for_courses_with_cache,
            self.app.search_for_people,
            self.app.search_for_people_with_cache,
        ):
            with self.assertRaises(AuthorizationRequired):
                search({"title": "x"})

        self.assertEqual(self.fetcher.search_for_courses.call_count, 0)
        self.assertEqual(self.fetcher.search_for_people.call_count, 0)

    def test_unconfirmed_current_user_is_rejected(self) -> None:
        self.app.current_user = User("2012019050020", "pw")
        with self.assertRaises(AuthorizationRequired):
            self.app.search_for_courses({})
        self.assertEqual(self.fetcher.search_for_courses.call_count, 0)

    def test_offline_search_needs_no_user(self) -> None:
        self.assertEqual(self.app.search_for_courses_in_cache({}), [])


class TestLiveAndFallback(_AppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.app.register("2012019050020", "811073")

    def test_live_results_are_written_through(self) -> None:
        option = {"department": "math"}
        courses = self.app.search_for_courses(option)
        self.assertEqual(courses, COURSES)
        self.assertEqual(self.app.cache.get(fingerprint("courses", option)), COURSES)
        self.fetcher.search_for_courses.assert_called_once_with(option)

    def test_offline_search_sees_written_through_results(self) -> None:
        self.app.search_for_courses({})
        self.app.search_for_people({})
        found = self.app.search_for_courses_in_cache({"title": "data"})
        self.assertEqual([c.course_id for c in found], ["C002"])
        self.assertEqual(self.app.search_for_people_in_cache({"name": "wang"}), PEOPLE)

    def test_with_cache_uses_live_results_when_possible(self) -> None:
        self.assertEqual(self.app.search_for_people_with_cache({}), PEOPLE)

    def test_fallback_equals_seeker_result(self) -> None:
        self.app.search_for_courses({})
        self.fetcher.search_for_courses.side_effect = NetworkFailure("portal down")

        option = {"instructors": "wang", "sort_by": "-credits"}
        result = self.app.search_for_courses_with_cache(option)

        self.assertEqual(result, self.app.seeker.search_for_courses(option))
        self.assertEqual([c.course_id for c in result], ["C001"])

    def test_fallback_on_empty_cache_is_empty_not_error(self) -> None:
        self.fetcher.search_for_people.side_effect = NetworkFailure("portal down")
        self.assertEqual(self.app.search_for_people_with_cache({"name": "x"}), [])

    def test_live_only_search_propagates_network_failure(self) -> None:
        self.fetcher.search_for_courses.side_effect = NetworkFailure("portal down")
        with self.assertRaises(NetworkFailure):
            self.app.search_for_courses({})

    def test_other_errors_are_not_swallowed(self) -> None:
        self.fetcher.search_for_courses.side_effect = RuntimeError("bug")
        with self.assertRaises(RuntimeError):
            self.app.search_for_courses_with_cache({})


class TestScrapedSearch(unittest.TestCase):
    def test_odd_weekday_cell_does_not_break_search(self) -> None:
        html = (
            "<table class=\"result\">"
            "<tr><th>课程代码</th><th>课程名称</th><th>上课时间</th></tr>"
            "<tr><td>C001</td><td>Linear Algebra</td><td>星期一 第1-2节</td></tr>"
            "<tr><td>C002</td><td>Data Structures</td><td>星期三第3-4节</td></tr>"
            "</table>"
        )
        session = mock.Mock()
        session.request.side_effect = [
            mock.Mock(text='<a href="/logout">x</a>'),
            mock.Mock(text=html),
        ]
        app = Application(cache=RecordCache(), fetcher=Fetcher(settings=Settings(), session=session), settings=Settings())
        app.register("2012019050020", "pw")

        courses = app.search_for_courses_with_cache({})
        self.assertEqual([(c.course_id, c.weekday) for c in courses], [("C001", 1), ("C002", 3)])


if __name__ == "__main__":
    unittest.main()
