"""
Forms for activity_log app.

ActivityFilterForm turns dashboard query parameters into an ActivityFilter.
Custom range dates are kept as typed: an unusable date is not a form error,
it just makes the custom range match nothing.
"""

from datetime import timedelta

from django import forms
from django.utils import timezone

from .filters import ALL, PERIOD_ALL, PERIOD_CHOICES, ActivityFilter
from .records import display_name, title_sort_key

SELECT_CLASS = (
    'block w-full rounded-md border-gray-300 shadow-sm '
    'focus:border-indigo-500 focus:ring-indigo-500 sm:text-sm'
)


class ActivityFilterForm(forms.Form):
    """
    Dashboard filter form.

    Usage in views:
        form = ActivityFilterForm(request.GET or None, snapshot=snapshot,
                                  self_profile=get_self_profile(request.user))
        if form.is_valid():
            spec = form.to_filter()
    """

    project = forms.ChoiceField(
        required=False,
        label='Progetto',
        widget=forms.Select(attrs={'class': SELECT_CLASS}),
    )
    user = forms.ChoiceField(
        required=False,
        label='Collaboratore',
        widget=forms.Select(attrs={'class': SELECT_CLASS}),
    )
    period = forms.ChoiceField(
        required=False,
        choices=PERIOD_CHOICES,
        label='Periodo',
        widget=forms.Select(attrs={'class': SELECT_CLASS}),
    )
    date_from = forms.CharField(
        required=False,
        label='Da',
        widget=forms.DateInput(attrs={'type': 'date', 'class': SELECT_CLASS}),
    )
    date_to = forms.CharField(
        required=False,
        label='A',
        widget=forms.DateInput(attrs={'type': 'date', 'class': SELECT_CLASS}),
    )

    def __init__(self, data=None, *, snapshot=None, self_profile=None, **kwargs):
        today = timezone.localdate()
        kwargs.setdefault('initial', {
            'project': ALL,
            'user': ALL,
            'period': PERIOD_ALL,
            'date_from': (today - timedelta(days=7)).isoformat(),
            'date_to': today.isoformat(),
        })
        super().__init__(data, **kwargs)

        projects = snapshot.projects if snapshot else ()
        profiles = list(snapshot.profiles) if snapshot else []
        # The acting user may be missing from a scoped profile collection
        if self_profile is not None and all(p.id != self_profile.id for p in profiles):
            profiles.append(self_profile)

        self.fields['project'].choices = [(ALL, 'Tutti i progetti')] + [
            (str(p.id), p.title)
            for p in sorted(projects, key=lambda p: title_sort_key(p.title))
        ]
        self.fields['user'].choices = [(ALL, 'Tutti i collaboratori')] + [
            (str(p.id), display_name(p)) for p in profiles
        ]

    def to_filter(self):
        """Build the ActivityFilter from cleaned data (call after is_valid)."""
        data = self.cleaned_data
        return ActivityFilter(
            project=data.get('project') or ALL,
            user=data.get('user') or ALL,
            period=data.get('period') or PERIOD_ALL,
            date_from=data.get('date_from') or None,
            date_to=data.get('date_to') or None,
        )
