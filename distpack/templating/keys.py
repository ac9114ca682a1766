"""Names of the variables available to packager templates."""

KEY_PROJECT_NAME = "projectName"
KEY_PROJECT_VERSION = "projectVersion"
KEY_PROJECT_DESCRIPTION = "projectDescription"
KEY_PROJECT_LONG_DESCRIPTION = "projectLongDescription"
KEY_PROJECT_WEBSITE = "projectWebsite"
KEY_PROJECT_LICENSE = "projectLicense"
KEY_PROJECT_LICENSE_URL = "projectLicenseUrl"
KEY_PROJECT_AUTHORS_BY_SPACE = "projectAuthorsBySpace"
KEY_PROJECT_AUTHORS_BY_COMMA = "projectAuthorsByComma"
KEY_PROJECT_TAGS_BY_SPACE = "projectTagsBySpace"
KEY_PROJECT_COPYRIGHT = "projectCopyright"

KEY_TAG_NAME = "tagName"
KEY_RELEASE_REPO_URL = "releaseRepoUrl"

KEY_DISTRIBUTION_NAME = "distributionName"
KEY_DISTRIBUTION_EXECUTABLE_NAME = "distributionExecutableName"
KEY_DISTRIBUTION_EXECUTABLE_WINDOWS = "distributionExecutableWindows"
KEY_DISTRIBUTION_ARTIFACT_FILE = "distributionArtifactFile"
KEY_DISTRIBUTION_ARTIFACT_FILE_NAME = "distributionArtifactFileName"
KEY_DISTRIBUTION_URL = "distributionUrl"
KEY_DISTRIBUTION_CHECKSUM_SHA_256 = "distributionChecksumSha256"
KEY_DISTRIBUTION_PACKAGE_DIRECTORY = "distributionPackageDirectory"
KEY_DISTRIBUTION_PREPARE_DIRECTORY = "distributionPrepareDirectory"
KEY_DISTRIBUTION_JAVA_MAIN_CLASS = "distributionJavaMainClass"
KEY_DISTRIBUTION_JAVA_MAIN_MODULE = "distributionJavaMainModule"

KEY_CHOCOLATEY_PACKAGE_NAME = "chocolateyPackageName"
KEY_CHOCOLATEY_PACKAGE_VERSION = "chocolateyPackageVersion"
KEY_CHOCOLATEY_USERNAME = "chocolateyUsername"
KEY_CHOCOLATEY_TITLE = "chocolateyTitle"
KEY_CHOCOLATEY_ICON_URL = "chocolateyIconUrl"
KEY_CHOCOLATEY_SOURCE = "chocolateySource"
KEY_CHOCOLATEY_PACKAGE_SOURCE_URL = "chocolateyPackageSourceUrl"
KEY_CHOCOLATEY_BUCKET_REPO_URL = "chocolateyBucketRepoUrl"
KEY_CHOCOLATEY_BUCKET_REPO_CLONE_URL = "chocolateyBucketRepoCloneUrl"
KEY_CHOCOLATEY_REPOSITORY_URL = "chocolateyRepositoryUrl"
KEY_CHOCOLATEY_REPOSITORY_CLONE_URL = "chocolateyRepositoryCloneUrl"
