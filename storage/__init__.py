# Content Store access layer: plain functions over database.get_db()
