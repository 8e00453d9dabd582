# User-facing strings rendered by the admin UI. The UI is German.

ERR_LOAD_ITEMS = "Fehler beim Laden der Artikel aus der Datenbank."
ERR_LOAD_REGIONS = "Fehler beim Laden der Gebiete aus der Datenbank."

ERR_ADD_ITEM = "Fehler beim Hinzufügen des Artikels zur Datenbank."
ERR_UPDATE_ITEM = "Fehler beim Aktualisieren des Artikels in der Datenbank."
ERR_DELETE_ITEM = "Fehler beim Löschen des Artikels aus der Datenbank."

ERR_ADD_REGION = "Fehler beim Hinzufügen des Gebiets zur Datenbank."
ERR_UPDATE_REGION = "Fehler beim Aktualisieren des Gebiets in der Datenbank."
ERR_DELETE_REGION = "Fehler beim Löschen des Gebiets aus der Datenbank."

ACCESS_DENIED_TITLE = "Zugriff verweigert."

TAB_SEARCH = "search"
TAB_MANAGE_ITEMS = "manageItems"
TAB_MANAGE_REGIONS = "manageRegions"

TAB_LABELS = {
    TAB_SEARCH: "Suchen",
    TAB_MANAGE_ITEMS: "Artikel erstellen",
    TAB_MANAGE_REGIONS: "Gebiete verwalten",
}
SIGN_OUT_LABEL = "Abmelden"
