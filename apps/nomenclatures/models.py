from django.db import models


class County(models.Model):
    name = models.CharField(max_length=100, unique=True)
    abbreviation = models.CharField(max_length=5, blank=True)
    region_code = models.CharField(max_length=20, blank=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = "Counties"

    def __str__(self):
        return self.name


class City(models.Model):
    name = models.CharField(max_length=100)
    county = models.ForeignKey(County, on_delete=models.CASCADE, related_name='cities')

    class Meta:
        ordering = ['name']
        verbose_name_plural = "Cities"

    def __str__(self):
        return f"{self.name} ({self.county.name})"


class Region(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Domain(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Federation(models.Model):
    """
    Federation an NGO can declare membership of.
    Names are unique so freeform additions collapse onto existing rows.
    """
    name = models.CharField(max_length=255, unique=True)
    abbreviation = models.CharField(max_length=50, blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Coalition(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name
