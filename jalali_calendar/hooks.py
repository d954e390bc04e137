app_name = "jalali_calendar"
app_title = "Jalali Calendar"
app_publisher = "Jalali Calendar Contributors"
app_description = "Jalali calendar engine: conversion, calendar arithmetic, locale names and date formatting/parsing."
app_email = "support@example.com"
app_license = "MIT"

# Boot
boot_session = "jalali_calendar.boot.boot_session"

# Fixtures / Data
fixtures = []
