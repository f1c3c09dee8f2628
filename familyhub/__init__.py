"""FamilyHub integration API - Google Calendar and chat proxy."""
