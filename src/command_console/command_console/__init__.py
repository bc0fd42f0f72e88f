"""Personal command console package.

Feature modules (attendance, calendar, hackathons, projects, tasks, notes,
applications, system, overview) each carry a model, a repository protocol with
its MySQL implementation, a service and a thin Flask controller.
"""
