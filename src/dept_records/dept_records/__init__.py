"""Department records portal.

Feature packages (departments, employees, attendance, documents, admin) each
carry a model, a repository contract with MySQL and in-memory implementations,
a service and a thin Flask controller.
"""
