import uuid

import django.db.models.deletion
from django.db import migrations, models


def base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('deleted_on', models.DateTimeField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Application',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, unique=True)),
                ('type', models.CharField(choices=[('INDEPENDENT', 'Independent'), ('SIMPLE', 'Simple'), ('STANDALONE', 'Standalone')], max_length=20)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('DISABLED', 'Disabled')], default='ACTIVE', max_length=20)),
                ('login_link', models.URLField(blank=True, null=True)),
                ('website', models.URLField()),
                ('short_description', models.CharField(max_length=200)),
                ('description', models.TextField()),
                ('steps', models.JSONField(blank=True, default=list, help_text='Onboarding steps shown to organizations')),
                ('logo', models.CharField(blank=True, help_text='Storage key of the logo', max_length=500, null=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ApplicationRequest',
            fields=base_fields() + [
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('DECLINED', 'Declined')], default='PENDING', max_length=20)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='requests', to='applications.application')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='application_requests', to='organizations.organization')),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrganizationApplication',
            fields=base_fields() + [
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('RESTRICTED', 'Restricted'), ('PENDING', 'Pending')], default='ACTIVE', max_length=20)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='organization_applications', to='applications.application')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='organization_applications', to='organizations.organization')),
            ],
            options={
                'unique_together': {('organization', 'application')},
            },
        ),
    ]
