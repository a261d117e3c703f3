"""
Тесты для утилит маскирования персональных данных (PII)
"""

from orderdesk.utils.pii_masking import mask_cpf, mask_name, sanitize_log_message


class TestMaskCpf:
    """Тесты маскирования CPF"""

    def test_mask_raw_cpf(self):
        """Маскирование CPF без форматирования"""
        assert mask_cpf("52998224725") == "529.***.***-25"

    def test_mask_formatted_cpf(self):
        """Маскирование форматированного CPF"""
        assert mask_cpf("529.982.247-25") == "529.***.***-25"

    def test_mask_short_cpf(self):
        """Маскирование короткого значения"""
        assert mask_cpf("123") == "***"

    def test_mask_none_cpf(self):
        assert mask_cpf(None) == "[no cpf]"

    def test_mask_empty_cpf(self):
        assert mask_cpf("") == "[no cpf]"


class TestMaskName:
    """Тесты маскирования имен"""

    def test_mask_full_name(self):
        """Маскирование полного имени"""
        assert mask_name("Maria Silva") == "M***a S***a"

    def test_mask_cyrillic_name(self):
        assert mask_name("Иванов Иван") == "И***в И***н"

    def test_mask_single_letter(self):
        """Маскирование одной буквы"""
        assert mask_name("A") == "*"

    def test_mask_two_letters(self):
        """Маскирование двух букв"""
        assert mask_name("Jo") == "J*"

    def test_mask_none_name(self):
        assert mask_name(None) == "[no name]"

    def test_mask_empty_name(self):
        assert mask_name("") == "[no name]"


class TestSanitizeLogMessage:
    """Тесты очистки сообщений лога"""

    def test_raw_cpf_masked(self):
        message = "Клиент с CPF 52998224725 уже существует"
        assert sanitize_log_message(message) == "Клиент с CPF 529.***.***-25 уже существует"

    def test_formatted_cpf_masked(self):
        message = "UNIQUE constraint failed: 529.982.247-25"
        assert sanitize_log_message(message) == "UNIQUE constraint failed: 529.***.***-25"

    def test_long_numbers_untouched(self):
        """Числа длиннее 11 цифр не считаются CPF"""
        message = "ID 1234567890123"
        assert sanitize_log_message(message) == message

    def test_message_without_pii(self):
        assert sanitize_log_message("Заказ #5 оплачен") == "Заказ #5 оплачен"
