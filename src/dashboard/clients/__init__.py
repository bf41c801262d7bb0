"""HTTP collaborators: NEIS, Open-Meteo, Nominatim and Google Sheets."""
