"""App -> widget host update trigger (method channel `taskify/widget`)."""
