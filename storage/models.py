from django.db import models


class StoredValue(models.Model):
    """
    One key of the local store.

    The value is the raw JSON string written by the repositories; the
    store itself never parses it.
    """

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stored_value'
        ordering = ['key']
        verbose_name = 'Stored Value'
        verbose_name_plural = 'Stored Values'

    def __str__(self):
        return f"{self.key} ({len(self.value)} chars)"

    @property
    def size(self):
        return len(self.value or '')
