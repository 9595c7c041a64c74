from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from django import forms
from django.utils import timezone

from .buckets import EggBuckets
from .models import PaymentRecord, local_day_bounds
from .services.requests import EggCollectionRequest

HEN_BUCKETS = ("small", "medium", "large", "extra_large", "damaged")
DUCK_BUCKETS = ("small", "medium", "large", "damaged")
EXPORT_FORMATS = (("csv", "CSV"), ("xlsx", "Excel"))


def flatten_collection_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Accept nested ``hen_eggs`` / ``duck_eggs`` objects as well as flat keys."""

    data = {key: value for key, value in payload.items() if key not in ("hen_eggs", "duck_eggs")}
    for species in ("hen", "duck"):
        nested = payload.get(f"{species}_eggs")
        if not isinstance(nested, Mapping):
            continue
        for key, value in nested.items():
            bucket = {"extraLarge": "extra_large", "xl": "extra_large"}.get(key, key)
            data[f"{species}_{bucket}"] = value
    return data


class EggCollectionRequestForm(forms.Form):
    farmer_id = forms.IntegerField(min_value=1)
    route_id = forms.IntegerField(min_value=1, required=False)
    collection_date = forms.DateTimeField(required=False)

    hen_small = forms.IntegerField(min_value=0, required=False)
    hen_medium = forms.IntegerField(min_value=0, required=False)
    hen_large = forms.IntegerField(min_value=0, required=False)
    hen_extra_large = forms.IntegerField(min_value=0, required=False)
    hen_damaged = forms.IntegerField(min_value=0, required=False)
    duck_small = forms.IntegerField(min_value=0, required=False)
    duck_medium = forms.IntegerField(min_value=0, required=False)
    duck_large = forms.IntegerField(min_value=0, required=False)
    duck_extra_large = forms.IntegerField(min_value=0, required=False)
    duck_damaged = forms.IntegerField(min_value=0, required=False)

    hen_egg_price = forms.DecimalField(max_digits=10, decimal_places=2)
    duck_egg_price = forms.DecimalField(max_digits=10, decimal_places=2)
    quality_notes = forms.CharField(required=False)

    def clean_duck_extra_large(self) -> int:
        value = self.cleaned_data.get("duck_extra_large") or 0
        if value:
            raise forms.ValidationError("Duck eggs have no extra large size.")
        return 0

    def _buckets(self, species: str, names: tuple[str, ...]) -> EggBuckets:
        return EggBuckets(**{name: self.cleaned_data.get(f"{species}_{name}") or 0 for name in names})

    def to_request(self, staff_id: int) -> EggCollectionRequest:
        cleaned = self.cleaned_data
        collection_date = cleaned.get("collection_date")
        if collection_date is not None and timezone.is_naive(collection_date):
            collection_date = timezone.make_aware(collection_date)
        return EggCollectionRequest(
            farmer_id=cleaned["farmer_id"],
            staff_id=staff_id,
            route_id=cleaned.get("route_id"),
            hen_eggs=self._buckets("hen", HEN_BUCKETS),
            duck_eggs=self._buckets("duck", DUCK_BUCKETS),
            hen_egg_price=cleaned["hen_egg_price"],
            duck_egg_price=cleaned["duck_egg_price"],
            quality_notes=cleaned.get("quality_notes") or "",
            collection_date=collection_date,
        )


class CollectionPeriodForm(forms.Form):
    start = forms.DateField()
    end = forms.DateField()
    route = forms.IntegerField(min_value=1, required=False)
    format = forms.ChoiceField(choices=EXPORT_FORMATS, required=False)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start"), cleaned.get("end")
        if start and end and end < start:
            raise forms.ValidationError("The end date must not be before the start date.")
        return cleaned

    @property
    def bounds(self) -> tuple[datetime, datetime]:
        start, _ = local_day_bounds(self.cleaned_data["start"])
        _, end = local_day_bounds(self.cleaned_data["end"])
        return start, end

    @property
    def export_format(self) -> str:
        return self.cleaned_data.get("format") or "csv"


class DailyReportForm(forms.Form):
    date = forms.DateField(required=False)

    @property
    def day(self):
        return self.cleaned_data.get("date") or timezone.localdate()


class BatchPaymentForm(forms.Form):
    collection_ids = forms.JSONField()
    payment_method = forms.ChoiceField(
        choices=PaymentRecord.PaymentMethod.choices,
        required=False,
    )

    def clean_collection_ids(self) -> list[int]:
        value = self.cleaned_data["collection_ids"]
        if not isinstance(value, list) or not value:
            raise forms.ValidationError("Provide a non-empty list of collection ids.")
        ids = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int):
                raise forms.ValidationError("Collection ids must be integers.")
            ids.append(item)
        return ids

    def clean_payment_method(self) -> str:
        return self.cleaned_data.get("payment_method") or PaymentRecord.PaymentMethod.BANK_TRANSFER
