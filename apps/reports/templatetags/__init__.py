"""
Template tags package for reports app.

Available tag libraries:
- report_tags: Formatting for exports and the activity overview
  (format_timestamp, staleness_label, staleness_color, days_ago)

Usage in templates:
    {% load report_tags %}
"""
