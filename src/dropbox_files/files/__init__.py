"""Files namespace: metadata records and the FileService facade."""
