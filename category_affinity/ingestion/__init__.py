"""
Ingestion layer — loads validated input records and prebuilt matrices.

Submodules:
  loader — JSON loaders for categories, customers, orders, the CoAffinity
           matrix and matrix stats.

Expected data directory layout::

  <data_dir>/categories.json   [{"id", "name", "popularity"}]
  <data_dir>/customers.json    [{"id", "name", "email", "createdAt"}]
  <data_dir>/orders.json       [{"id", "customerId", "createdAt", "total",
                                 "items": [{"categoryId", "quantity", "price"}]}]
  <matrix_dir>/coaffinity-matrix.json
  <matrix_dir>/matrix-stats.json
"""
