"""AWS metric catalogs and builders."""
