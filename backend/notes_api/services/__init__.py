# Services package init
"""
Notes API: Services Layer
===========================

What:  Data-access layer sitting between routes (HTTP) and database (persistence).
How:   Services accept validated schemas, run one statement per operation,
       and translate store outcomes into application exceptions.

Service Inventory:
    - NoteService: create / list / get / update / delete for notes
"""
