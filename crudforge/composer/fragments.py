"""Skeleton and fragment registry for the clean-architecture artifact set.

Every artifact kind maps to one skeleton file under
``templates/<template-id>/`` and the slots that skeleton declares.  Fragments
carry their own indentation; tier, operation and flag variations are
expressed only through fragment predicates, never through branches in the
skeleton files.
"""

from __future__ import annotations

from crudforge.composer.slots import (
    Skeleton,
    Slot,
    all_of,
    any_of,
    emits_events,
    fragment,
    has_op,
    lacks_op,
    negate,
    op_is,
    permissions,
    tier_at_least,
    tier_below,
)
from crudforge.models import (
    ArtifactCategory,
    ArtifactDescriptor,
    EntityTier,
    Operation,
)

CREATE = Operation.CREATE
READ = Operation.READ
UPDATE = Operation.UPDATE
DELETE = Operation.DELETE

audited = tier_at_least(EntityTier.AUDITED)
fully_audited = tier_at_least(EntityTier.FULLY_AUDITED)
hard_delete = tier_below(EntityTier.FULLY_AUDITED)

#: The handler stamps audit data and therefore needs the user and a clock.
needs_clock = any_of(
    all_of(op_is(CREATE, UPDATE), audited),
    all_of(op_is(DELETE), fully_audited),
)

#: The shared create/update payload lives beside the create command when one
#: is generated, otherwise beside the update command.
owns_dto = any_of(op_is(CREATE), all_of(op_is(UPDATE), lacks_op(CREATE)))
imports_dto = all_of(op_is(UPDATE), has_op(CREATE))

SKELETONS: dict[str, Skeleton] = {}


def _register(skeleton: Skeleton) -> None:
    SKELETONS[skeleton.key] = skeleton


def artifact_kind(logical_name: str) -> str:
    """Collapse per-operation logical names onto their skeleton kind."""
    for suffix in ("command", "validator", "event"):
        if logical_name.endswith(f"-{suffix}"):
            return suffix
    return logical_name


def skeleton_key(descriptor: ArtifactDescriptor) -> str:
    if descriptor.category == ArtifactCategory.TEST:
        return f"{artifact_kind(descriptor.subject or '')}-test"
    return artifact_kind(descriptor.logical_name)


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="model",
    template="model.cs.j2",
    slots=(
        Slot("usings", (fragment("using Domain.Common;"),)),
        Slot(
            "base_types",
            (
                fragment("Entity<Guid>"),
                fragment("IAuditable", audited),
                fragment("ISoftDelete", fully_audited),
            ),
            separator=", ",
        ),
        Slot(
            "audit",
            (
                fragment("""
    public DateTime CreatedAt { get; private set; }

    public string CreatedBy { get; private set; } = string.Empty;

    public DateTime? UpdatedAt { get; private set; }

    public string? UpdatedBy { get; private set; }

    public void MarkCreated(string userName, DateTime now)
    {
        CreatedAt = now;
        CreatedBy = userName;
    }

    public void MarkUpdated(string userName, DateTime now)
    {
        UpdatedAt = now;
        UpdatedBy = userName;
    }
""", audited),
                fragment("""
    public DateTime? DeletedAt { get; private set; }

    public Guid? DeletedByUserId { get; private set; }

    public bool IsDeleted => DeletedAt is not null;

    public void Delete(Guid userId, DateTime now)
    {
        DeletedAt = now;
        DeletedByUserId = userId;
    }
""", fully_audited),
            ),
            separator="\n\n",
            prefix="    #region Auditing\n\n",
            suffix="\n\n    #endregion",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Persistence mapping
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="persistence-mapping",
    template="persistence_mapping.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Domain.{{ plural }};"),
            fragment("using Microsoft.EntityFrameworkCore;"),
            fragment("using Microsoft.EntityFrameworkCore.Metadata.Builders;"),
        )),
        Slot(
            "configuration",
            (
                fragment("""
        builder.Property(x => x.CreatedAt)
            .IsRequired();

        builder.Property(x => x.CreatedBy)
            .IsRequired()
            .HasMaxLength(256);

        builder.Property(x => x.UpdatedBy)
            .HasMaxLength(256);
""", audited),
                fragment("""
        builder.HasIndex(x => x.DeletedAt);

        builder.HasQueryFilter(x => x.DeletedAt == null);
""", fully_audited),
            ),
            separator="\n\n",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Access control
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="access-control",
    template="access_control.cs.j2",
    slots=(
        Slot(
            "constants",
            (
                fragment('    public const string Create = "Permissions.{{ plural }}.Create";', has_op(CREATE)),
                fragment('    public const string View = "Permissions.{{ plural }}.View";', has_op(READ)),
                fragment('    public const string Edit = "Permissions.{{ plural }}.Edit";', has_op(UPDATE)),
                fragment('    public const string Delete = "Permissions.{{ plural }}.Delete";', has_op(DELETE)),
            ),
        ),
        Slot(
            "all",
            (
                fragment("Create", has_op(CREATE)),
                fragment("View", has_op(READ)),
                fragment("Edit", has_op(UPDATE)),
                fragment("Delete", has_op(DELETE)),
            ),
            separator=", ",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="event",
    template="event.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;", audited),
            fragment("using Domain.AuditLogs;", audited),
            fragment("using MediatR;"),
            fragment("using Microsoft.Extensions.Logging;"),
        )),
        Slot(
            "handler_params",
            (
                fragment("ILogger<{{ singular }}{{ event }}Event> logger"),
                fragment("ITenantDbContext dbContext", audited),
            ),
            separator=", ",
        ),
        Slot(
            "handle_body",
            (
                fragment(
                    '            logger.LogInformation("{{ singular }} {Id} {{ event | lower }}", '
                    "notification.{{ singular }}Id);"
                ),
                fragment("""
            dbContext.AuditLogs.Add(AuditLog.For(nameof({{ singular }}), notification.{{ singular }}Id, "{{ event }}"));
            await dbContext.SaveChangesAsync(cancellationToken);
""", audited),
                fragment("            await Task.CompletedTask;", negate(audited)),
            ),
            separator="\n\n",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------

_FIND_ENTITY = """
            var entity = await dbContext.{{ plural }}.FindAsync([request.Id], cancellationToken)
                ?? throw new NotFoundException(nameof({{ singular }}), request.Id);
"""

_register(Skeleton(
    key="command",
    template="command.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.Common.Exceptions;", op_is(UPDATE, DELETE)),
            fragment("using Application.{{ plural }}.Commands.Create{{ singular }};", imports_dto),
            fragment("using Application.{{ plural }}.Events;", emits_events),
            fragment("using Domain.{{ plural }};"),
            fragment("using MediatR;"),
        )),
        Slot(
            "command_params",
            (
                fragment("Guid Id", op_is(UPDATE, DELETE)),
                fragment("{{ singular }}ForCreateUpdateDto Dto", op_is(CREATE, UPDATE)),
            ),
            separator=", ",
        ),
        Slot(
            "handler_params",
            (
                fragment("ITenantDbContext dbContext"),
                fragment("ICurrentUserService currentUserService", needs_clock),
                fragment("TimeProvider timeProvider", needs_clock),
                fragment("IPublisher publisher", emits_events),
            ),
            separator=", ",
        ),
        Slot(
            "handle_body",
            (
                fragment(
                    "            var entity = {{ singular }}.Create(Guid.NewGuid(), request.Dto.Name);",
                    op_is(CREATE),
                ),
                fragment(_FIND_ENTITY, op_is(UPDATE, DELETE)),
                fragment("            entity.Update(request.Dto.Name);", op_is(UPDATE)),
                fragment(
                    "            entity.MarkCreated(currentUserService.GetUserName(), "
                    "timeProvider.GetUtcNow().UtcDateTime);",
                    all_of(op_is(CREATE), audited),
                ),
                fragment(
                    "            entity.MarkUpdated(currentUserService.GetUserName(), "
                    "timeProvider.GetUtcNow().UtcDateTime);",
                    all_of(op_is(UPDATE), audited),
                ),
                fragment(
                    "            entity.Delete(currentUserService.GetUserId(), "
                    "timeProvider.GetUtcNow().UtcDateTime);",
                    all_of(op_is(DELETE), fully_audited),
                ),
                fragment("            dbContext.{{ plural }}.Add(entity);", op_is(CREATE)),
                fragment(
                    "            dbContext.{{ plural }}.Update(entity);",
                    any_of(op_is(UPDATE), all_of(op_is(DELETE), fully_audited)),
                ),
                fragment(
                    "            dbContext.{{ plural }}.Remove(entity);",
                    all_of(op_is(DELETE), hard_delete),
                ),
                fragment("            await dbContext.SaveChangesAsync(cancellationToken);"),
                fragment(
                    "            await publisher.Publish(new {{ singular }}{{ event }}Event(entity.Id), "
                    "cancellationToken);",
                    emits_events,
                ),
                fragment("            return entity.Id;", op_is(CREATE)),
                fragment("            return Unit.Value;", op_is(UPDATE, DELETE)),
            ),
            separator="\n",
        ),
        Slot(
            "payload",
            (
                fragment("""
/// <summary>
/// Payload shared by the create and update {{ singular }} commands.
/// </summary>
public sealed record {{ singular }}ForCreateUpdateDto
{
    public required string Name { get; init; }
}
""", owns_dto),
            ),
            prefix="\n",
        ),
    ),
))

_register(Skeleton(
    key="validator",
    template="validator.cs.j2",
    slots=(
        Slot("usings", (fragment("using FluentValidation;"),)),
        Slot(
            "rules",
            (
                fragment("""
        RuleFor(x => x.Id)
            .NotEmpty();
""", op_is(UPDATE, DELETE)),
                fragment("""
        RuleFor(x => x.Dto.Name)
            .NotEmpty()
            .MaximumLength(256);
""", op_is(CREATE, UPDATE)),
            ),
            separator="\n\n",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="list-query",
    template="list_query.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.Common.Pagination;"),
            fragment("using MediatR;"),
            fragment("using Microsoft.EntityFrameworkCore;"),
        )),
        Slot(
            "filters",
            (fragment(".Where(x => x.DeletedAt == null)", fully_audited),),
            prefix="\n                ",
        ),
        Slot(
            "projection",
            (
                fragment("x.Id"),
                fragment("x.Name"),
                fragment("x.CreatedAt", audited),
            ),
            separator=", ",
        ),
        Slot(
            "dto_fields",
            (
                fragment("Guid Id"),
                fragment("string Name"),
                fragment("DateTime CreatedAt", audited),
            ),
            separator=", ",
        ),
    ),
))

_register(Skeleton(
    key="by-id-query",
    template="by_id_query.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.Common.Exceptions;"),
            fragment("using Domain.{{ plural }};"),
            fragment("using MediatR;"),
            fragment("using Microsoft.EntityFrameworkCore;"),
        )),
        Slot(
            "filters",
            (fragment("x.DeletedAt == null", fully_audited),),
            prefix=" && ",
        ),
        Slot(
            "projection",
            (
                fragment("x.Id"),
                fragment("x.Name"),
                fragment("x.CreatedAt", audited),
                fragment("x.CreatedBy", audited),
                fragment("x.UpdatedAt", audited),
            ),
            separator=", ",
        ),
        Slot(
            "dto_fields",
            (
                fragment("Guid Id"),
                fragment("string Name"),
                fragment("DateTime CreatedAt", audited),
                fragment("string CreatedBy", audited),
                fragment("DateTime? UpdatedAt", audited),
            ),
            separator=", ",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Mapping profile
# ---------------------------------------------------------------------------

_register(Skeleton(
    key="mapping-profile",
    template="mapping_profile.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.{{ plural }}.Commands.{{ dto_owner }}{{ singular }};", has_op(CREATE, UPDATE)),
            fragment("using Application.{{ plural }}.Queries.Get{{ plural }};", has_op(READ)),
            fragment("using Application.{{ plural }}.Queries.Get{{ singular }}ById;", has_op(READ)),
            fragment("using Domain.{{ plural }};"),
            fragment("using Mapster;"),
        )),
        Slot(
            "list_map",
            (
                fragment("            .Map(dest => dest.Id, src => src.Id)"),
                fragment("            .Map(dest => dest.Name, src => src.Name)"),
                fragment("            .Map(dest => dest.CreatedAt, src => src.CreatedAt)", audited),
            ),
        ),
        Slot(
            "read_map",
            (
                fragment("            .Map(dest => dest.Id, src => src.Id)"),
                fragment("            .Map(dest => dest.Name, src => src.Name)"),
                fragment("            .Map(dest => dest.CreatedAt, src => src.CreatedAt)", audited),
                fragment("            .Map(dest => dest.CreatedBy, src => src.CreatedBy)", audited),
                fragment("            .Map(dest => dest.UpdatedAt, src => src.UpdatedAt)", audited),
            ),
        ),
        Slot(
            "mappings",
            (
                fragment("""
        config.NewConfig<{{ singular }}ForCreateUpdateDto, {{ singular }}>()
            .ConstructUsing(src => {{ singular }}.Create(Guid.NewGuid(), src.Name));
""", has_op(CREATE, UPDATE)),
                fragment("""
        config.NewConfig<{{ singular }}, {{ singular }}ForListDto>()
{{ slots.list_map }};

        config.NewConfig<{{ singular }}, {{ singular }}ForReadDto>()
{{ slots.read_map }};
""", has_op(READ)),
            ),
            separator="\n\n",
            default="        config.NewConfig<{{ singular }}, {{ singular }}>();",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

def _authorize(constant: str) -> Slot:
    return Slot(
        f"auth_{constant.lower()}",
        (fragment(f"    [Authorize(Policy = {{{{ plural }}}}Permissions.{constant})]", permissions),),
        suffix="\n",
    )


_register(Skeleton(
    key="endpoint",
    template="endpoint.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common.Pagination;", has_op(READ)),
            fragment("using Application.{{ plural }}.Commands.Create{{ singular }};", has_op(CREATE)),
            fragment("using Application.{{ plural }}.Commands.Delete{{ singular }};", has_op(DELETE)),
            fragment("using Application.{{ plural }}.Commands.Update{{ singular }};", has_op(UPDATE)),
            fragment("using Application.{{ plural }}.Queries.Get{{ plural }};", has_op(READ)),
            fragment("using Application.{{ plural }}.Queries.Get{{ singular }}ById;", has_op(READ)),
            fragment("using Domain.{{ layout.permissions_dir | namespace }};", permissions),
            fragment("using MediatR;"),
            fragment("using Microsoft.AspNetCore.Authorization;", permissions),
            fragment("using Microsoft.AspNetCore.Mvc;"),
        )),
        _authorize("View"),
        _authorize("Create"),
        _authorize("Edit"),
        _authorize("Delete"),
        Slot("create_result", (
            fragment("        return CreatedAtAction(nameof(GetById), new { id }, id);", has_op(READ)),
            fragment("        return Ok(id);", lacks_op(READ)),
        )),
        Slot(
            "actions",
            (
                fragment("""
    /// <summary>
    /// Gets a paginated list of {{ plural }}.
    /// </summary>
{{ slots.auth_view }}    [HttpGet]
    public async Task<ActionResult<PaginatedList<{{ singular }}ForListDto>>> Get{{ plural }}([FromQuery] {{ singular }}ForRequestDto requestDto, CancellationToken cancellationToken)
    {
        return Ok(await sender.Send(new Get{{ plural }}Query(requestDto), cancellationToken));
    }

    /// <summary>
    /// Gets a single {{ singular }} by id.
    /// </summary>
{{ slots.auth_view }}    [HttpGet("{id:guid}")]
    public async Task<ActionResult<{{ singular }}ForReadDto>> GetById(Guid id, CancellationToken cancellationToken)
    {
        var {{ camel }}Dto = await sender.Send(new Get{{ singular }}ByIdQuery(id), cancellationToken);
        return Ok({{ camel }}Dto);
    }
""", has_op(READ)),
                fragment("""
    /// <summary>
    /// Creates a new {{ singular }}.
    /// </summary>
{{ slots.auth_create }}    [HttpPost]
    public async Task<ActionResult<Guid>> Create([FromBody] {{ singular }}ForCreateUpdateDto dto, CancellationToken cancellationToken)
    {
        var id = await sender.Send(new Create{{ singular }}Command(dto), cancellationToken);
{{ slots.create_result }}
    }
""", has_op(CREATE)),
                fragment("""
    /// <summary>
    /// Updates an existing {{ singular }}.
    /// </summary>
{{ slots.auth_edit }}    [HttpPut("{id:guid}")]
    public async Task<IActionResult> Update(Guid id, [FromBody] {{ singular }}ForCreateUpdateDto dto, CancellationToken cancellationToken)
    {
        await sender.Send(new Update{{ singular }}Command(id, dto), cancellationToken);
        return NoContent();
    }
""", has_op(UPDATE)),
                fragment("""
    /// <summary>
    /// Deletes a {{ singular }}.
    /// </summary>
{{ slots.auth_delete }}    [HttpDelete("{id:guid}")]
    public async Task<IActionResult> Delete(Guid id, CancellationToken cancellationToken)
    {
        await sender.Send(new Delete{{ singular }}Command(id), cancellationToken);
        return NoContent();
    }
""", has_op(DELETE)),
            ),
            separator="\n\n",
        ),
    ),
))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

_SEED_HELPER = """
    private async Task<{{ singular }}> Seed{{ singular }}Async()
    {
        var entity = {{ singular }}.Create(Guid.NewGuid(), "Existing {{ singular }}");
        _dbContext.{{ plural }}.Add(entity);
        await _dbContext.SaveChangesAsync(CancellationToken.None);
        return entity;
    }
"""

_register(Skeleton(
    key="command-test",
    template="command_test.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.Common.Exceptions;", op_is(UPDATE, DELETE)),
            fragment("using Application.{{ plural }}.Commands.Create{{ singular }};", imports_dto),
            fragment("using Application.{{ plural }}.Commands.{{ Op }}{{ singular }};"),
            fragment("using Application.{{ plural }}.Events;", emits_events),
            fragment("using BaseTests;"),
            fragment("using Domain.{{ plural }};"),
            fragment("using FluentAssertions;"),
            fragment("using MediatR;", emits_events),
            fragment("using Microsoft.EntityFrameworkCore;", all_of(op_is(DELETE), fully_audited)),
            fragment("using Microsoft.Extensions.Time.Testing;", needs_clock),
            fragment("using NSubstitute;", any_of(needs_clock, emits_events)),
            fragment("using Xunit;"),
        )),
        Slot(
            "fields",
            (
                fragment(
                    "    private readonly ICurrentUserService _currentUserService = "
                    "Substitute.For<ICurrentUserService>();",
                    needs_clock,
                ),
                fragment("    private readonly FakeTimeProvider _timeProvider = new();", needs_clock),
                fragment("    private readonly IPublisher _publisher = Substitute.For<IPublisher>();", emits_events),
            ),
            suffix="\n",
        ),
        Slot(
            "handler_args",
            (
                fragment("_dbContext"),
                fragment("_currentUserService", needs_clock),
                fragment("_timeProvider", needs_clock),
                fragment("_publisher", emits_events),
            ),
            separator=", ",
        ),
        Slot("missing_command", (
            fragment(
                'new Update{{ singular }}Command(Guid.NewGuid(), new {{ singular }}ForCreateUpdateDto { Name = "Missing" })',
                op_is(UPDATE),
            ),
            fragment("new Delete{{ singular }}Command(Guid.NewGuid())", op_is(DELETE)),
        )),
        Slot("create_asserts", (
            fragment("        entity.CreatedAt.Should().Be(_timeProvider.GetUtcNow().UtcDateTime);", audited),
            fragment(
                "        await _publisher.Received(1).Publish(Arg.Any<{{ singular }}CreatedEvent>(), "
                "Arg.Any<CancellationToken>());",
                emits_events,
            ),
        )),
        Slot("update_asserts", (
            fragment("        updated.UpdatedAt.Should().NotBeNull();", audited),
            fragment(
                "        await _publisher.Received(1).Publish(Arg.Any<{{ singular }}UpdatedEvent>(), "
                "Arg.Any<CancellationToken>());",
                emits_events,
            ),
        )),
        Slot("delete_asserts", (
            fragment("""
        var deleted = await _dbContext.{{ plural }}.IgnoreQueryFilters().SingleAsync(x => x.Id == entity.Id);
        deleted.DeletedAt.Should().NotBeNull();
""", fully_audited),
            fragment("        (await _dbContext.{{ plural }}.FindAsync(entity.Id)).Should().BeNull();", hard_delete),
            fragment(
                "        await _publisher.Received(1).Publish(Arg.Any<{{ singular }}DeletedEvent>(), "
                "Arg.Any<CancellationToken>());",
                emits_events,
            ),
        )),
        Slot(
            "facts",
            (
                fragment("""
    [Fact]
    public async Task Handle_Should_Persist{{ singular }}_And_ReturnId()
    {
        var command = new Create{{ singular }}Command(new {{ singular }}ForCreateUpdateDto { Name = "New {{ singular }}" });

        var id = await _handler.Handle(command, CancellationToken.None);

        var entity = await _dbContext.{{ plural }}.FindAsync(id);
        entity.Should().NotBeNull();
        entity!.Name.Should().Be("New {{ singular }}");
{{ slots.create_asserts }}
    }
""", op_is(CREATE)),
                fragment("""
    [Fact]
    public async Task Handle_Should_Rename{{ singular }}()
    {
        var entity = await Seed{{ singular }}Async();
        var command = new Update{{ singular }}Command(entity.Id, new {{ singular }}ForCreateUpdateDto { Name = "Renamed {{ singular }}" });

        await _handler.Handle(command, CancellationToken.None);

        var updated = await _dbContext.{{ plural }}.FindAsync(entity.Id);
        updated!.Name.Should().Be("Renamed {{ singular }}");
{{ slots.update_asserts }}
    }
""", op_is(UPDATE)),
                fragment("""
    [Fact]
    public async Task Handle_Should_Delete{{ singular }}()
    {
        var entity = await Seed{{ singular }}Async();

        await _handler.Handle(new Delete{{ singular }}Command(entity.Id), CancellationToken.None);

{{ slots.delete_asserts }}
    }
""", op_is(DELETE)),
                fragment("""
    [Fact]
    public async Task Handle_Should_Throw_When_{{ singular }}DoesNotExist()
    {
        var command = {{ slots.missing_command }};

        var act = () => _handler.Handle(command, CancellationToken.None);

        await act.Should().ThrowAsync<NotFoundException>();
    }
""", op_is(UPDATE, DELETE)),
                fragment(_SEED_HELPER, op_is(UPDATE, DELETE)),
            ),
            separator="\n\n",
        ),
    ),
))

_register(Skeleton(
    key="validator-test",
    template="validator_test.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.{{ plural }}.Commands.Create{{ singular }};", imports_dto),
            fragment("using Application.{{ plural }}.Commands.{{ Op }}{{ singular }};"),
            fragment("using FluentValidation.TestHelper;"),
            fragment("using Xunit;"),
        )),
        Slot("valid_command", (
            fragment(
                'new Create{{ singular }}Command(new {{ singular }}ForCreateUpdateDto { Name = "Valid {{ singular }}" })',
                op_is(CREATE),
            ),
            fragment(
                "new Update{{ singular }}Command(Guid.NewGuid(), "
                'new {{ singular }}ForCreateUpdateDto { Name = "Valid {{ singular }}" })',
                op_is(UPDATE),
            ),
            fragment("new Delete{{ singular }}Command(Guid.NewGuid())", op_is(DELETE)),
        )),
        Slot("named_command", (
            fragment(
                "new Create{{ singular }}Command(new {{ singular }}ForCreateUpdateDto { Name = name })",
                op_is(CREATE),
            ),
            fragment(
                "new Update{{ singular }}Command(Guid.NewGuid(), new {{ singular }}ForCreateUpdateDto { Name = name })",
                op_is(UPDATE),
            ),
        )),
        Slot("empty_id_command", (
            fragment(
                "new Update{{ singular }}Command(Guid.Empty, "
                'new {{ singular }}ForCreateUpdateDto { Name = "Valid {{ singular }}" })',
                op_is(UPDATE),
            ),
            fragment("new Delete{{ singular }}Command(Guid.Empty)", op_is(DELETE)),
        )),
        Slot(
            "facts",
            (
                fragment("""
    [Fact]
    public void Should_Pass_For_ValidCommand()
    {
        var result = _validator.TestValidate({{ slots.valid_command }});

        result.ShouldNotHaveAnyValidationErrors();
    }
"""),
                fragment("""
    [Theory]
    [InlineData("")]
    [InlineData("   ")]
    public void Should_Fail_When_NameIsEmpty(string name)
    {
        var result = _validator.TestValidate({{ slots.named_command }});

        result.ShouldHaveValidationErrorFor(x => x.Dto.Name);
    }
""", op_is(CREATE, UPDATE)),
                fragment("""
    [Fact]
    public void Should_Fail_When_IdIsEmpty()
    {
        var result = _validator.TestValidate({{ slots.empty_id_command }});

        result.ShouldHaveValidationErrorFor(x => x.Id);
    }
""", op_is(UPDATE, DELETE)),
            ),
            separator="\n\n",
        ),
    ),
))

_register(Skeleton(
    key="list-query-test",
    template="list_query_test.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.{{ plural }}.Queries.Get{{ plural }};"),
            fragment("using BaseTests;"),
            fragment("using Domain.{{ plural }};"),
            fragment("using FluentAssertions;"),
            fragment("using Xunit;"),
        )),
        Slot(
            "facts",
            (
                fragment("""
    [Fact]
    public async Task Handle_Should_Return_All{{ plural }}()
    {
        _dbContext.{{ plural }}.AddRange(
            {{ singular }}.Create(Guid.NewGuid(), "First {{ singular }}"),
            {{ singular }}.Create(Guid.NewGuid(), "Second {{ singular }}"));
        await _dbContext.SaveChangesAsync(CancellationToken.None);

        var result = await _handler.Handle(new Get{{ plural }}Query(new {{ singular }}ForRequestDto()), CancellationToken.None);

        result.TotalCount.Should().Be(2);
    }
"""),
                fragment("""
    [Fact]
    public async Task Handle_Should_Filter_By_SearchTerm()
    {
        _dbContext.{{ plural }}.AddRange(
            {{ singular }}.Create(Guid.NewGuid(), "Alpha"),
            {{ singular }}.Create(Guid.NewGuid(), "Beta"));
        await _dbContext.SaveChangesAsync(CancellationToken.None);

        var request = new {{ singular }}ForRequestDto { SearchTerm = "Alp" };
        var result = await _handler.Handle(new Get{{ plural }}Query(request), CancellationToken.None);

        result.Items.Should().ContainSingle(x => x.Name == "Alpha");
    }
"""),
                fragment("""
    [Fact]
    public async Task Handle_Should_Exclude_Deleted{{ plural }}()
    {
        var deleted = {{ singular }}.Create(Guid.NewGuid(), "Deleted {{ singular }}");
        deleted.Delete(Guid.NewGuid(), DateTime.UtcNow);
        _dbContext.{{ plural }}.AddRange(deleted, {{ singular }}.Create(Guid.NewGuid(), "Active {{ singular }}"));
        await _dbContext.SaveChangesAsync(CancellationToken.None);

        var result = await _handler.Handle(new Get{{ plural }}Query(new {{ singular }}ForRequestDto()), CancellationToken.None);

        result.Items.Should().ContainSingle(x => x.Name == "Active {{ singular }}");
    }
""", fully_audited),
            ),
            separator="\n\n",
        ),
    ),
))

_register(Skeleton(
    key="by-id-query-test",
    template="by_id_query_test.cs.j2",
    slots=(
        Slot("usings", (
            fragment("using Application.Common;"),
            fragment("using Application.Common.Exceptions;"),
            fragment("using Application.{{ plural }}.Queries.Get{{ singular }}ById;"),
            fragment("using BaseTests;"),
            fragment("using Domain.{{ plural }};"),
            fragment("using FluentAssertions;"),
            fragment("using Xunit;"),
        )),
        Slot(
            "facts",
            (
                fragment("""
    [Fact]
    public async Task Handle_Should_Return_{{ singular }}_When_Found()
    {
        var entity = {{ singular }}.Create(Guid.NewGuid(), "Existing {{ singular }}");
        _dbContext.{{ plural }}.Add(entity);
        await _dbContext.SaveChangesAsync(CancellationToken.None);

        var result = await _handler.Handle(new Get{{ singular }}ByIdQuery(entity.Id), CancellationToken.None);

        result.Id.Should().Be(entity.Id);
        result.Name.Should().Be("Existing {{ singular }}");
    }
"""),
                fragment("""
    [Fact]
    public async Task Handle_Should_Throw_When_{{ singular }}DoesNotExist()
    {
        var act = () => _handler.Handle(new Get{{ singular }}ByIdQuery(Guid.NewGuid()), CancellationToken.None);

        await act.Should().ThrowAsync<NotFoundException>();
    }
"""),
                fragment("""
    [Fact]
    public async Task Handle_Should_Throw_When_{{ singular }}IsDeleted()
    {
        var entity = {{ singular }}.Create(Guid.NewGuid(), "Deleted {{ singular }}");
        entity.Delete(Guid.NewGuid(), DateTime.UtcNow);
        _dbContext.{{ plural }}.Add(entity);
        await _dbContext.SaveChangesAsync(CancellationToken.None);

        var act = () => _handler.Handle(new Get{{ singular }}ByIdQuery(entity.Id), CancellationToken.None);

        await act.Should().ThrowAsync<NotFoundException>();
    }
""", fully_audited),
            ),
            separator="\n\n",
        ),
    ),
))
