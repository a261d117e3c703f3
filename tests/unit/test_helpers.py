"""
Тесты для вспомогательных функций
"""

from orderdesk.utils.helpers import clean_cpf, format_cpf, get_now


class TestGetNow:
    def test_returns_utc(self):
        """Текущее время всегда в UTC"""
        now = get_now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0


class TestCleanCpf:
    """Тесты очистки CPF"""

    def test_formatted(self):
        assert clean_cpf("529.982.247-25") == "52998224725"

    def test_raw(self):
        assert clean_cpf("52998224725") == "52998224725"

    def test_with_spaces(self):
        assert clean_cpf(" 529 982 247 25 ") == "52998224725"

    def test_none_and_empty(self):
        assert clean_cpf(None) == ""
        assert clean_cpf("") == ""


class TestFormatCpf:
    """Тесты форматирования CPF"""

    def test_format_raw(self):
        assert format_cpf("52998224725") == "529.982.247-25"

    def test_format_already_formatted(self):
        assert format_cpf("529.982.247-25") == "529.982.247-25"

    def test_wrong_length_returned_as_is(self):
        """Строка не из 11 цифр возвращается без изменений"""
        assert format_cpf("123") == "123"

    def test_empty(self):
        assert format_cpf(None) == ""
