"""core/ -- Kernel for Vulnado: settings and datastore bootstrap. No imports from auth/."""
