"""
Django Forms for the Election Tracker
=====================================

Validate the shape of incoming JSON payloads:
- SaveSelectionsForm: an ordered list of picks
- LoginForm: administrator credentials

Roster membership, the selection limit and duplicates are checked by
``selections.services.validate_picks`` so the same rules hold for every
caller, not only HTTP.
"""

from django import forms # pyright: ignore[reportMissingModuleSource]
from django.core.exceptions import ValidationError # pyright: ignore[reportMissingModuleSource]


class SaveSelectionsForm(forms.Form):
    """
    Payload of a save: {"selections": [{"name": ..., "list_name": ...}, ...]}

    Order of the list is the priority order.
    """

    selections = forms.JSONField(required=False)

    def clean_selections(self):
        """Return the picks as (name, list_name) tuples."""
        value = self.cleaned_data.get('selections')

        if value is None:
            return []

        if not isinstance(value, list):
            raise ValidationError('Selections must be a list.')

        picks = []
        for item in value:
            if not isinstance(item, dict):
                raise ValidationError('Each selection must be an object.')
            name = item.get('name')
            list_name = item.get('list_name')
            if not isinstance(name, str) or not isinstance(list_name, str):
                raise ValidationError('Each selection needs a "name" and a "list_name".')
            picks.append((name.strip(), list_name.strip()))

        return picks


class LoginForm(forms.Form):
    email = forms.CharField(max_length=254)
    password = forms.CharField(max_length=128, strip=False)

    def clean_email(self):
        return self.cleaned_data.get('email', '').strip()
