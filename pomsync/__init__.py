"""pomsync: keep pom.xml and package.json versions in step across a monorepo."""
