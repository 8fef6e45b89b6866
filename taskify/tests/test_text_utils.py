import datetime
import unittest

from taskify.utils.text_utils import (
    match_choice, month_label, normalize_search, parse_timestamp, parse_user_date, strip_accents,
)


class TestTextUtils(unittest.TestCase):

    def test_month_label(self):
        self.assertEqual(month_label(datetime.date(2025, 3, 10)), "março 2025")
        self.assertEqual(month_label(datetime.date(2024, 12, 31)), "dezembro 2024")

    def test_strip_accents(self):
        self.assertEqual(strip_accents("Saúde"), "Saude")
        self.assertEqual(strip_accents("concluída"), "concluida")

    def test_normalize_search(self):
        self.assertEqual(normalize_search("  Beber ÁGUA "), "beber agua")
        self.assertEqual(normalize_search(None), "")

    def test_match_choice(self):
        statuses = ["pendente", "em progresso", "concluída", "cancelada"]
        self.assertEqual(match_choice("CONCLUIDA", statuses), "concluída")
        self.assertEqual(match_choice("em_progresso", statuses), "em progresso")
        self.assertEqual(match_choice("em-progresso", statuses), "em progresso")
        self.assertIsNone(match_choice("arquivada", statuses))
        self.assertIsNone(match_choice(None, statuses))

    def test_parse_timestamp(self):
        expected = datetime.datetime(2025, 3, 5, 9, 0, tzinfo=datetime.timezone.utc)
        self.assertEqual(parse_timestamp("2025-03-05T09:00:00Z"), expected)
        self.assertEqual(parse_timestamp("2025-03-05T09:00:00+00:00"), expected)
        self.assertEqual(parse_timestamp("2025-03-05T09:00:00"), expected)
        self.assertEqual(parse_timestamp(datetime.date(2025, 3, 5)),
                         datetime.datetime(2025, 3, 5, tzinfo=datetime.timezone.utc))

    def test_parse_timestamp_invalid(self):
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp(""))
        self.assertIsNone(parse_timestamp("amanhã de manhã"))

    def test_parse_user_date(self):
        self.assertEqual(parse_user_date("25/03/2025"),
                         datetime.datetime(2025, 3, 25, 12, 0, tzinfo=datetime.timezone.utc))
        self.assertEqual(parse_user_date("2025-03-25").date(), datetime.date(2025, 3, 25))
        self.assertEqual(parse_user_date("hoje").date(), datetime.date.today())
        self.assertEqual(parse_user_date("Amanhã").date(), datetime.date.today() + datetime.timedelta(days=1))
        self.assertIsNone(parse_user_date("semana que vem"))


if __name__ == '__main__':
    unittest.main()
