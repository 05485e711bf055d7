"""
Catalog package for the storefront API.

This package contains the product query engine, the schemas that
describe a catalog query and its paginated result, and the route
definitions for browsing categories and products. The query engine in
``query`` is a pure function over a snapshot of the product
collection; the record store in ``app.storage`` hands it that snapshot.
"""
